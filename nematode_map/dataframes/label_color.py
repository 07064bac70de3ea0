from typing import Dict, Union

import dataframely as dy
import polars as pl

from nematode_map.colors import color_for_label, darken_hex_color
from nematode_map.dataframes.observation import ObservationSchema, label_names
from nematode_map.types import Label


class LabelColorSchema(dy.Schema):
    label = dy.String(nullable=False)
    color = dy.String(nullable=False)
    darkened_color = dy.String(nullable=False)

    @classmethod
    def build_df(
        cls,
        observation_lf: Union[
            dy.LazyFrame[ObservationSchema], dy.DataFrame[ObservationSchema]
        ],
    ) -> dy.DataFrame["LabelColorSchema"]:
        """
        Assign every common name its marker color.

        Colors depend only on the label text, so they don't change when other
        labels are added or removed.
        """
        labels = label_names(observation_lf.lazy())
        colors = [color_for_label(label) for label in labels]

        df = pl.DataFrame(
            {
                "label": pl.Series(labels, dtype=pl.String),
                "color": pl.Series(colors, dtype=pl.String),
                "darkened_color": pl.Series(
                    [darken_hex_color(color) for color in colors], dtype=pl.String
                ),
            }
        )
        return cls.validate(df)


def get_color_for_label(
    label_color_dataframe: dy.DataFrame[LabelColorSchema], label: Label
) -> str:
    return label_color_dataframe.filter(pl.col("label") == label)["color"].item()


def to_dict(
    label_color_dataframe: dy.DataFrame[LabelColorSchema],
) -> Dict[Label, str]:
    return dict(label_color_dataframe.select("label", "color").iter_rows())
