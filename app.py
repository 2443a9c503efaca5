import io  # in-memory buffer for CSV downloads
import os  # lets you work with files and folders on your computer
import threading  # lock around the shared snapshot
import numpy as np  # random number generator used to perturb growth rates
from flask import Flask, render_template, request, redirect, url_for, flash, send_file  # tools for building a web app with pages, forms and messages
from ecotimeline.aggregation import compute_global_stats, compute_global_series, global_depletion_year, snapshot_frame  # summary numbers and chart series
from ecotimeline.app_utils import log_event  # writes one line to the audit log CSV
from ecotimeline.charts import global_trend_html, country_trend_html  # plotly charts rendered to HTML
from ecotimeline.config import DATA_DIR, SECRET_KEY, DEFAULT_RESOURCE, DEFAULT_YEAR, START_YEAR, END_YEAR, PROJECTION_PIVOT_YEAR, PLAYBACK_INTERVAL_SECONDS, noise_seed  # settings and year range
from ecotimeline.data_store import snapshot_csv  # CSV export of a snapshot
from ecotimeline.entities import UNITS  # display units per resource
from ecotimeline.map_helpers import build_map_html  # folium map for the selected year
from ecotimeline.models import ResourceType  # Oil, Coal or Gas
from ecotimeline.playback import next_playback_year, toggle_playback  # play/pause logic for the year slider
from ecotimeline.projection import generate_world_snapshot, year_point  # the projection engine

# Ensure Flask uses the project's `templates/` directory
app = Flask(__name__, template_folder=os.path.join(os.path.dirname(__file__), 'templates'))  # create the Flask app and show where the HTML templates are
app.secret_key = SECRET_KEY  # secret key used to protect flash messages
app.config['AUDIT_LOG'] = os.path.join(DATA_DIR, 'audit_log.csv')  # path to the CSV file where all audit events are stored

DECADE_TICKS = list(range(START_YEAR, END_YEAR + 1, 10))  # tick marks under the slider


def new_rng():
    """Random generator for one snapshot; seeded when ECOTIMELINE_NOISE_SEED is set."""
    return np.random.default_rng(noise_seed())


# The current snapshot is replaced as a whole whenever the resource changes.
# A WorldSnapshot carries its own resource, so one reference is the whole state.
snapshot_lock = threading.Lock()  # serializes regeneration between request threads
snapshot = generate_world_snapshot(ResourceType(DEFAULT_RESOURCE), rng=new_rng())  # timelines for every country


def regenerate_snapshot(resource):
    """Replace the current snapshot with a freshly generated one for `resource` and return it."""
    global snapshot
    with snapshot_lock:
        fresh = generate_world_snapshot(resource, rng=new_rng())
        snapshot = fresh
    return fresh


def current_snapshot(resource):
    """Snapshot for `resource`: the current one if it matches, else a freshly generated one."""
    data = snapshot  # read the global once; another request may replace it
    if data.resource == resource:
        return data
    data = regenerate_snapshot(resource)
    audit('snapshot_generated', details=f'Generated {resource.value} snapshot')
    return data


def resource_from(raw):
    """ResourceType for `raw`, defaulting to the current snapshot's; None if unknown."""
    if raw is None:
        return snapshot.resource
    try:
        return ResourceType(raw)
    except ValueError:
        flash(f'Unknown resource "{raw}".', 'warning')
        return None


def audit(action, details=''):
    user = request.remote_addr or 'anonymous'  # no accounts, so record where the request came from
    log_event(app.config['AUDIT_LOG'], user, action, path=request.path, details=details)


def parse_year(raw):
    """Integer year inside the configured range, or None if `raw` is not one."""
    try:
        year = int(raw)
    except (TypeError, ValueError):
        return None
    if START_YEAR <= year <= END_YEAR:
        return year
    return None


# Template filter for formatting large numbers
@app.template_filter('human_num')  # register a custom filter in Flask called 'human_num' for use in HTML templates
def human_num(value, decimals=0):  # function to format numbers nicely with commas
    try:
        if decimals == 0:  # if no decimal places needed
            return f"{float(value):,.0f}"  # format number with commas, no decimals
        return f"{float(value):,.{decimals}f}"  # format number with specified decimal places
    except (TypeError, ValueError):  # if value is not a number
        return value  # return the original value without formatting


# Routes
@app.route('/')  # main route (home page)
def index():
    return redirect('/dashboard')  # everything happens on the dashboard


@app.route('/dashboard')  # route for the main dashboard page
def dashboard():
    resource = resource_from(request.args.get('resource'))  # resource from the URL, or the current one
    if resource is None:  # unknown resource name in the URL
        return redirect(url_for('dashboard'))
    raw_year = request.args.get('year')  # year picked on the slider
    year = DEFAULT_YEAR if raw_year is None else parse_year(raw_year)
    if year is None:  # not a number, or outside the timeline
        flash(f'Year must be between {START_YEAR} and {END_YEAR}.', 'warning')
        return redirect(url_for('dashboard', resource=resource.value))
    playing = request.args.get('playing') == '1'  # is the timeline animating?

    data = current_snapshot(resource)  # regenerates only when the resource changed
    if not playing:  # playback refreshes twice a second, only log real visits
        audit('page_view', details=f'Viewed {resource.value} {year}')
    stats = compute_global_stats(data, year)  # totals for the selected year
    series = compute_global_series(data)  # totals for every year, for the trend chart
    d_day = global_depletion_year(series)  # first year the summed reserves hit zero
    unit = UNITS[resource]

    next_url = None
    if playing:  # work out where the next tick goes
        next_year, still_playing = next_playback_year(year, playing)
        next_url = url_for('dashboard', resource=resource.value, year=next_year, playing='1' if still_playing else None)

    return render_template(
        'dashboard.html',  # render the dashboard HTML template
        resource=resource,  # selected resource
        resources=list(ResourceType),  # buttons for the resource selector
        year=year,  # selected year
        start_year=START_YEAR,
        end_year=END_YEAR,
        pivot_year=PROJECTION_PIVOT_YEAR,
        ticks=DECADE_TICKS,
        playing=playing,
        next_url=next_url,  # where the page refreshes to while playing
        refresh_seconds=PLAYBACK_INTERVAL_SECONDS,
        stats=stats,  # total reserves, consumption and depleted count
        unit=unit,  # e.g. 'Billion Barrels'
        d_day=d_day if d_day is not None else f"{END_YEAR}+",  # global depletion year for display
        trend_chart=global_trend_html(series, resource, unit),  # plotly area chart HTML
        map_html=build_map_html(data, year),  # folium map HTML
        countries=sorted(data.values(), key=lambda t: t.name))  # list for the country links


@app.route('/resource', methods=['POST'])  # resource selector buttons post here
def change_resource():
    year = parse_year(request.form.get('year')) or DEFAULT_YEAR  # keep the slider where it was
    resource = resource_from(request.form.get('resource', ''))
    if resource is None:
        return redirect(url_for('dashboard'))
    if resource != snapshot.resource:
        regenerate_snapshot(resource)  # new resource means a brand new snapshot
        audit('resource_change', details=f'Switched to {resource.value}')
    return redirect(url_for('dashboard', resource=resource.value, year=year))


@app.route('/play', methods=['POST'])  # play/pause button posts here
def play():
    resource = resource_from(request.form.get('resource'))  # stay on the resource the page was showing
    if resource is None:
        return redirect(url_for('dashboard'))
    year = parse_year(request.form.get('year')) or DEFAULT_YEAR
    playing = request.form.get('playing') == '1'
    year, playing = toggle_playback(year, playing)  # restart from the beginning if already at the end
    audit('playback_toggle', details='play' if playing else 'pause')
    return redirect(url_for('dashboard', resource=resource.value, year=year, playing='1' if playing else None))


@app.route('/country/<iso>')  # route to show the timeline of a specific country
def country_profile(iso):
    iso = iso.upper()
    resource = resource_from(request.args.get('resource'))  # resource of the page that linked here
    if resource is None:
        return redirect('/dashboard')
    data = current_snapshot(resource)
    if iso not in data:  # if country not found
        flash('Country not found.', 'warning')  # show warning message
        return redirect(url_for('dashboard', resource=resource.value))  # redirect to dashboard
    timeline = data[iso]
    year = parse_year(request.args.get('year')) or DEFAULT_YEAR
    audit('page_view', details=f'Viewed country {iso}')
    frame = snapshot_frame(data)
    country_rows = frame[frame['id'] == iso]  # this country's history only
    unit = UNITS[resource]
    return render_template(
        'country.html',  # render country profile template
        country=timeline,  # id, name and depletion year
        point=year_point(timeline, year),  # values for the selected year
        year=year,
        end_year=END_YEAR,
        resource=resource,
        unit=unit,
        trend_chart=country_trend_html(country_rows, unit))  # plotly line chart HTML


@app.route('/export/<resource_name>.csv')  # download a snapshot as CSV
def export_csv(resource_name):
    resource = resource_from(resource_name)
    if resource is None:
        return redirect(url_for('dashboard'))
    data = snapshot  # read once; another request may replace it
    if data.resource != resource:
        data = generate_world_snapshot(resource, rng=new_rng())  # leave the on-screen snapshot alone
    audit('export', details=f'Exported {resource.value} snapshot')
    buf = io.BytesIO(snapshot_csv(data).encode('utf-8'))
    return send_file(buf, mimetype='text/csv', as_attachment=True, download_name=f'ecotimeline_{resource.value.lower()}.csv')


if __name__ == '__main__':
    app.run(debug=os.getenv('FLASK_DEBUG') == '1')
