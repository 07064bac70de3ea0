from enum import Enum
from typing import AbstractSet, Literal, NamedTuple, TypeAlias, Union

RegionName: TypeAlias = str
Label: TypeAlias = str


class LatLng(NamedTuple):
    """A latitude/longitude coordinate pair."""

    lat: float
    lng: float


class AllLabels(Enum):
    """Sentinel selecting every label present in the observations."""

    ALL = "all"


ALL_LABELS = AllLabels.ALL

# An explicit set of labels, or every label. An empty set selects nothing.
Selection: TypeAlias = Union[AbstractSet[Label], AllLabels]

PresenceValue: TypeAlias = Literal["label", "nematode"]


def is_empty_selection(selection: Selection) -> bool:
    return selection is not ALL_LABELS and len(selection) == 0
