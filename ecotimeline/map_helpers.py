import folium
from branca.element import Template, MacroElement

from ecotimeline.aggregation import color_ratio
from ecotimeline.config import CRITICAL_RATIO
from ecotimeline.entities import COUNTRY_CENTROIDS
from ecotimeline.projection import year_point

NO_DATA_STYLE = {'fill_color': '#1e293b', 'fill_opacity': 0.5}
DEPLETED_STYLE = {'fill_color': '#334155', 'fill_opacity': 0.3}
CRITICAL_COLOR = '#f43f5e'
HEALTHY_COLOR = '#06b6d4'
BORDER_COLOR = '#0f172a'


def entity_style(timeline, year):
    """Fill colour and opacity for one country in one year."""
    if timeline is None or year_point(timeline, year) is None:
        return dict(NO_DATA_STYLE)
    if year_point(timeline, year).is_depleted:
        return dict(DEPLETED_STYLE)
    ratio = color_ratio(timeline, year)
    return {
        'fill_color': CRITICAL_COLOR if ratio < CRITICAL_RATIO else HEALTHY_COLOR,
        'fill_opacity': 0.3 + ratio * 0.6,
    }


def tooltip_html(timeline, year):
    point = year_point(timeline, year)
    html = f"<b>{timeline.name}</b><br>"
    if point is None:
        return html + "No Data"
    html += (
        f"Reserves: {point.reserves:.2f}<br>"
        f"Consumption: {point.consumption:.2f}"
    )
    if point.is_depleted:
        html += "<br><b style='color:#f43f5e'>[DEPLETED]</b>"
    return html


def build_map_html(snapshot, year):
    """Builds a Folium map with one circle per country in `snapshot`, styled for `year`.
    Returns rendered HTML string for embedding."""
    m = folium.Map(location=[20, 0], zoom_start=2, min_zoom=2, zoom_control=False, tiles=None)

    folium.TileLayer(
        tiles='https://{s}.basemaps.cartocdn.com/dark_all/{z}/{x}/{y}{r}.png',
        attr='&copy; <a href="https://www.openstreetmap.org/copyright">OpenStreetMap</a> &copy; <a href="https://carto.com/attributions">CARTO</a>',
        name='Dark Map'
    ).add_to(m)

    for entity_id, timeline in snapshot.items():
        location = COUNTRY_CENTROIDS.get(entity_id)
        if location is None:  # nowhere to draw it
            continue
        style = entity_style(timeline, year)
        folium.CircleMarker(
            location,
            radius=12,
            color=BORDER_COLOR,
            weight=1,
            fill=True,
            fill_color=style['fill_color'],
            fill_opacity=style['fill_opacity'],
            tooltip=folium.Tooltip(tooltip_html(timeline, year), sticky=True),
        ).add_to(m)

    legend_html = '''
    {% macro html(this, kwargs) %}
    <div style="position: fixed; bottom: 50px; left: 10px; width: 210px; z-index:9999; font-size:12px;">
        <div style="background:#0f172a; color:#f1f5f9; padding:8px; border:1px solid #334155;">
            <b>Reserves remaining (vs 1990)</b><br>
            <span style="color:#06b6d4;">&#9679;</span> Healthy (brighter = more left)<br>
            <span style="color:#f43f5e;">&#9679;</span> Critical (under 20%)<br>
            <span style="color:#334155;">&#9679;</span> Depleted<br>
        </div>
    </div>
    {% endmacro %}
    '''
    tpl = Template(legend_html)
    macro = MacroElement()
    macro._template = tpl
    m.get_root().add_child(macro)

    return m._repr_html_()
