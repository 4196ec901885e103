import logging

from shiny import reactive, render
from shiny.express import input, ui
from shinywidgets import render_plotly

# Import organized modules
from road_fines.config import (
    JURISDICTION_OPTIONS,
    JURISDICTIONS,
    LOG_LEVEL,
    NO_DATA_MESSAGE,
)
from road_fines.data_manager import try_load_dataset
from road_fines.datasets import (
    build_age_dataset,
    build_fine_type_dataset,
    build_rate_dataset,
    build_trend_dataset,
)
from road_fines.filters import FilterSelection, available_years, default_selection
from road_fines.plotting import (
    create_age_plot,
    create_fine_type_plot,
    create_rate_plot,
    create_trend_plot,
)

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Helpers for UI mapping
JURISDICTION_CHOICES = {code: code for _label, code in JURISDICTION_OPTIONS}

# ======================================================
#  DATA (fetched once per chart module at startup)
# ======================================================
age_data, age_error = try_load_dataset("age")
fine_type_data, fine_type_error = try_load_dataset("fine_types")
trend_data, trend_error = try_load_dataset("trend")

age_records = age_data.records if age_data is not None else None
YEAR_CHOICES = (
    [str(y) for y in available_years(age_records)] if age_records is not None else []
)
DEFAULT_SELECTION = default_selection(age_records) if age_records is not None else None


def _message(text: str):
    return ui.div(text, class_="no-data-message", style="padding:2rem; text-align:center;")


# ======================================================
#  REACTIVE STATE
# ======================================================


@reactive.calc
def selection():
    if DEFAULT_SELECTION is None:
        return FilterSelection()
    year_raw = input.year()
    year = int(year_raw) if year_raw else DEFAULT_SELECTION.year
    return DEFAULT_SELECTION.with_year(year).with_jurisdictions(input.jurisdictions() or ())


@reactive.calc
def age_dataset():
    return build_age_dataset(age_records, selection())


@reactive.calc
def rate_dataset():
    return build_rate_dataset(age_records, selection())


@reactive.calc
def fine_type_dataset():
    return build_fine_type_dataset(fine_type_data.records)


@reactive.calc
def trend_dataset():
    return build_trend_dataset(trend_data.records)


# ======================================================
#  UI LAYOUT
# ======================================================
ui.page_opts(
    title="Road Fine Enforcement",
    fillable=False,
    fillable_mobile=True,
    full_width=True,
    id="page",
    lang="en",
)

with ui.sidebar(open="always", position="right"):
    ui.input_select(
        "year",
        "Year",
        YEAR_CHOICES,
        selected=YEAR_CHOICES[0] if YEAR_CHOICES else None,
    )
    ui.input_checkbox_group(
        "jurisdictions",
        "Jurisdictions",
        JURISDICTION_CHOICES,
        selected=list(JURISDICTIONS),
    )
    ui.input_action_button(
        "reset_filters",
        "Reset filters",
        class_="btn-primary mt-3",
    )


@reactive.effect
@reactive.event(input.reset_filters)
def _reset_filters():
    ui.update_select("year", selected=YEAR_CHOICES[0] if YEAR_CHOICES else None)
    ui.update_checkbox_group("jurisdictions", selected=list(JURISDICTIONS))


with ui.navset_tab(id="main_tabs"):
    with ui.nav_panel("Age groups"):
        with ui.card():
            ui.card_header("Fines by age group and jurisdiction")

            @render.ui
            def age_status():
                if age_error:
                    return _message(age_error)
                if age_dataset().is_empty:
                    return _message(NO_DATA_MESSAGE)
                return None

            @render_plotly
            def age_plot():
                if age_error or age_dataset().is_empty:
                    return None
                return create_age_plot(age_dataset())

        with ui.card():
            ui.card_header("Fines per 10,000 licence holders")

            @render.ui
            def rate_status():
                if age_error:
                    return _message(age_error)
                if rate_dataset().is_empty:
                    return _message(NO_DATA_MESSAGE)
                return None

            @render_plotly
            def rate_plot():
                if age_error or rate_dataset().is_empty:
                    return None
                return create_rate_plot(rate_dataset())

    with ui.nav_panel("Fine types"):
        with ui.card():
            ui.card_header("Mobile phone use vs other offences")

            @render.ui
            def fine_type_status():
                if fine_type_error:
                    return _message(fine_type_error)
                if fine_type_dataset().is_empty:
                    return _message(NO_DATA_MESSAGE)
                return None

            @render_plotly
            def fine_type_plot():
                if fine_type_error or fine_type_dataset().is_empty:
                    return None
                return create_fine_type_plot(fine_type_dataset())

    with ui.nav_panel("Camera detection"):
        with ui.card():
            ui.card_header("Camera-based vs police-issued enforcement")

            @render.ui
            def trend_status():
                if trend_error:
                    return _message(trend_error)
                if trend_dataset().is_empty:
                    return _message(NO_DATA_MESSAGE)
                return None

            @render_plotly
            def trend_plot():
                if trend_error or trend_dataset().is_empty:
                    return None
                return create_trend_plot(trend_dataset())

        with ui.card():
            ui.card_header("Insights")

            @render.ui
            def trend_insights():
                if trend_error:
                    return None
                lines = trend_dataset().insights
                return ui.tags.ul(*[ui.tags.li(line) for line in lines])
