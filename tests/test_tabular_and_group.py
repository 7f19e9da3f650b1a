from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from plotattrs import PlotContext, create_plot
from plotattrs.errors import SeriesDataError
from plotattrs.tabular import ColumnRef, DataFrameSource, MappingSource, TableSource, as_table_source, is_table


@pytest.fixture
def frame() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "time": [0.0, 1.0, 2.0, 3.0],
            "speed": [1.0, 3.0, 2.0, 4.0],
            "load": [10, 20, 30, 40],
            "site": ["a", "b", "a", "b"],
        }
    )


def test_adapters_satisfy_the_table_protocol(frame: pd.DataFrame) -> None:
    assert isinstance(as_table_source(frame), DataFrameSource)
    assert isinstance(as_table_source({"a": [1]}), MappingSource)
    assert isinstance(as_table_source(frame), TableSource)
    assert is_table(frame) and is_table({"a": [1]})
    assert not is_table([1, 2])
    with pytest.raises(TypeError):
        as_table_source([1, 2])


def test_column_lookup_and_missing_column(frame: pd.DataFrame) -> None:
    col = ColumnRef(frame, "speed").resolve()
    assert col.label == "speed"
    assert col.values.dtype == np.float64
    with pytest.raises(SeriesDataError, match="column not found"):
        ColumnRef(frame, "nope").resolve()


def test_table_with_two_columns_labels_axes(ctx: PlotContext, frame: pd.DataFrame) -> None:
    p = create_plot(ctx, frame, "time", "speed")

    assert len(p) == 1
    assert p[0].label == "speed"
    assert p.attributes["xlabel"] == "time"
    assert p.attributes["ylabel"] == "speed"
    assert np.array_equal(p.series_data(0)[1], [1.0, 3.0, 2.0, 4.0])


def test_explicit_axis_label_beats_column_name(ctx: PlotContext, frame: pd.DataFrame) -> None:
    p = create_plot(ctx, frame, "time", "speed", xlabel="t [s]")
    assert p.attributes["xlabel"] == "t [s]"


def test_mapping_tables_work_like_dataframes(ctx: PlotContext) -> None:
    p = create_plot(ctx, {"t": [0, 1], "v": [2, 3]}, "t", "v")
    assert np.array_equal(p.series_data(0)[0], [0.0, 1.0])
    assert p[0].label == "v"


def test_single_column_and_missing_column(ctx: PlotContext, frame: pd.DataFrame) -> None:
    p = create_plot(ctx, frame, "load")
    assert np.array_equal(p.series_data(0)[0], [0.0, 1.0, 2.0, 3.0])
    with pytest.raises(SeriesDataError, match="column not found"):
        create_plot(ctx, frame, "time", "missing")


def test_whole_dataframe_plots_numeric_columns(ctx: PlotContext, frame: pd.DataFrame) -> None:
    p = create_plot(ctx, frame)
    assert [s.label for s in p] == ["time", "speed", "load"]


def test_pandas_series_name_becomes_label(ctx: PlotContext) -> None:
    p = create_plot(ctx, pd.Series([1.0, 2.0], name="price"))
    assert p[0].label == "price"


def test_categorical_x_column_is_kept(ctx: PlotContext, frame: pd.DataFrame) -> None:
    p = create_plot(ctx, frame, "site", "speed")
    assert p.series_data(0)[0].tolist() == ["a", "b", "a", "b"]


def test_group_splits_series_by_key(ctx: PlotContext) -> None:
    p = create_plot(ctx, [1, 2, 3, 4], group=["a", "b", "a", "b"])

    assert [s.label for s in p] == ["a", "b"]
    assert np.array_equal(p.series_data(0)[1], [1.0, 3.0])
    assert np.array_equal(p.series_data(1)[0], [1.0, 3.0])
    assert "group" not in p[0].attributes


def test_group_by_table_column(ctx: PlotContext, frame: pd.DataFrame) -> None:
    p = create_plot(ctx, frame, "time", "speed", group="site")
    assert [s.label for s in p] == ["a", "b"]
    assert np.array_equal(p.series_data(1)[1], [3.0, 4.0])


def test_group_length_must_match(ctx: PlotContext) -> None:
    with pytest.raises(SeriesDataError, match="group has 2 entries"):
        create_plot(ctx, [1, 2, 3], group=["a", "b"])
