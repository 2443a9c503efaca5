import pandas as pd
import plotly.express as px
import plotly.io as pio

CHART_UNAVAILABLE = '<p>Charts unavailable.</p>'
NO_DATA = '<p>No data available.</p>'


def global_trend_html(series, resource, unit):
    """Area chart of summed reserves per year, as an embeddable HTML fragment."""
    if not series:
        return NO_DATA
    df = pd.DataFrame([aggregate.model_dump() for aggregate in series])
    try:
        fig = px.area(df, x='year', y='total_reserves', title=f'Global Trend ({resource.value})',
                      labels={'year': 'Year', 'total_reserves': f'Reserves ({unit})'})
        fig.update_traces(line_color='#06b6d4')
        fig.update_layout(template='plotly_dark', margin=dict(l=10, r=10, t=40, b=10), height=260)
        return pio.to_html(fig, full_html=False, include_plotlyjs='cdn')
    except Exception:  # render errors fall back to a placeholder
        return CHART_UNAVAILABLE


def country_trend_html(frame, unit):
    """Reserves and consumption lines for one country's rows of a snapshot frame."""
    if frame.empty:
        return NO_DATA
    long_df = frame.melt(id_vars=['year'], value_vars=['reserves', 'consumption'],
                         var_name='Series', value_name='Value')
    try:
        fig = px.line(long_df, x='year', y='Value', color='Series', markers=True,
                      title=f'Reserves and Consumption ({unit})', labels={'year': 'Year'})
        fig.update_layout(template='plotly_dark')
        return pio.to_html(fig, full_html=False, include_plotlyjs='cdn')
    except Exception:
        return CHART_UNAVAILABLE
