from poche.domain import Entry


def by_kind(kind: str):
    def _filter(e: Entry) -> bool:
        return e.kind == kind

    return _filter


def by_month_kind_category(month: str, kind: str, category: str):
    def _filter(e: Entry) -> bool:
        return e.month == month and e.kind == kind and e.category == category

    return _filter
