from typing import Union

import dataframely as dy

from nematode_map.dataframes.observation import ObservationSchema, filter_by_selection
from nematode_map.decluster import with_declustered_coordinates
from nematode_map.defaults import JITTER_BASE_DEGREES
from nematode_map.types import ALL_LABELS, Selection


class DisplayPointSchema(ObservationSchema):
    """Placeable observations with marker coordinates.

    Inherits every observation column and adds the declustered position. The
    original ``latitude``/``longitude`` stay untouched, so region membership
    is always decided on the recorded coordinates.
    """

    displayLatitude = dy.Float64(nullable=False)
    displayLongitude = dy.Float64(nullable=False)

    @classmethod
    def build_df(
        cls,
        observation_lf: Union[
            dy.LazyFrame[ObservationSchema], dy.DataFrame[ObservationSchema]
        ],
        selection: Selection = ALL_LABELS,
        base_degrees: float = JITTER_BASE_DEGREES,
    ) -> dy.DataFrame["DisplayPointSchema"]:
        """
        Build marker positions for the selected observations.

        Args:
            observation_lf: Flattened observations
            selection: Labels to show, or ALL_LABELS. An empty selection shows nothing.
            base_degrees: Radius step of the declustering spiral

        Returns:
            A validated DisplayPointSchema dataframe ordered by observationIndex
        """
        lf = filter_by_selection(observation_lf, selection).sort("observationIndex")

        df = with_declustered_coordinates(lf, base_degrees=base_degrees).collect()
        return cls.validate(df)
