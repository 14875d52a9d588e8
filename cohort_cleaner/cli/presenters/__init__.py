from .summary import SummaryPresenter, SummaryRequest

__all__ = ["SummaryPresenter", "SummaryRequest"]
