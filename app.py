import json

import toga
from toga.colors import rgba
from toga.style import Pack

import config
from globe import GlobeView, IssLayer, graticule, load_geojson
from logging_config import configure_logging, get_logger
from track import TrackHistory
from updater import PositionUpdater, handoff_to_loop

logger = get_logger(__name__)


def to_rgba(color):
    return rgba(*color)


class ISSTracker(toga.App):
    """
    One window with a canvas globe. The ISS marker is the last known position,
    the colored line behind it is the ground track.
    """

    def startup(self):
        self.prev_x_coord = 0.0
        self.prev_y_coord = 0.0

        self.outlines = graticule()
        self.coastlines = []
        if config.COASTLINE_GEOJSON:
            with open(config.COASTLINE_GEOJSON) as f:
                self.coastlines = load_geojson(json.load(f))
            logger.info("Loaded %d coastline outlines", len(self.coastlines))

        width, height = config.WINDOW_SIZE
        self.view = GlobeView(width, height, zoom_m=config.INITIAL_ZOOM_M)
        self.history = TrackHistory(config.MAX_POSITIONS)
        self.iss_layer = IssLayer(config.GROUND_TRACK_COLORS, redraw=self.draw, view=self.view)

        self.canvas = toga.Canvas(
            style=Pack(flex=1),
            on_drag=self.on_drag,
            on_press=self.on_press,
            on_alt_press=self.on_alt_press,
            on_alt_drag=self.on_alt_drag,
            on_resize=self.on_resize,
        )

        self.commands.add(
            toga.Command(
                self.on_exit_command,
                text="Exit",
                tooltip="Exit the application",
                group=toga.Group.FILE,
            ),
            toga.Command(
                self.on_about_command,
                text="About",
                group=toga.Group.HELP,
            ),
        )

        self.main_window = toga.MainWindow(title=config.APP_NAME, size=config.WINDOW_SIZE)
        self.main_window.content = toga.Box(style=Pack(direction="column"), children=[self.canvas])
        self.main_window.show()

        self.draw()

        # Updates arrive on the updater thread; the canvas belongs to the GUI thread
        self.updater = PositionUpdater(self.history, handoff_to_loop(self.loop, self.iss_layer.update))
        self.updater.start()

    def on_exit_command(self, command, **kwargs):
        logger.info("Exiting %s...", config.APP_NAME)
        self.updater.stop(timeout=1)
        self.exit()

    async def on_about_command(self, command, **kwargs):
        await self.main_window.dialog(
            toga.InfoDialog(
                f"About {config.APP_NAME}",
                "Tracks the International Space Station and its ground track.",
            )
        )

    def drawPolylines(self, lines, color, line_width=1.0):
        with self.canvas.Stroke(color=to_rgba(color), line_width=line_width) as stroke:
            for line in lines:
                for run in self.view.project_polyline(line):
                    stroke.move_to(*run[0])
                    for point in run[1:]:
                        stroke.line_to(*point)

    def drawGlobe(self):
        cx, cy = self.view.width / 2, self.view.height / 2
        with self.canvas.Fill(color=to_rgba(config.GLOBE_FILL)) as fill:
            fill.ellipse(cx, cy, self.view.radius, self.view.radius)
        self.drawPolylines(self.outlines, config.GRATICULE_COLOR)
        self.drawPolylines(self.coastlines, config.COASTLINE_COLOR, 1.5)

    def drawGroundTrack(self):
        track = self.iss_layer.ground_track
        if not track.positions:
            return

        sx, sy, visible = self.view.project_many(
            [p.latitude for p in track.positions],
            [p.longitude for p in track.positions],
            [p.altitude_m for p in track.positions],
        )

        for i, (_, _, color) in enumerate(track.segments()):
            if not (visible[i] and visible[i + 1]):
                continue
            with self.canvas.Stroke(color=to_rgba(color), line_width=config.TRACK_LINE_WIDTH) as stroke:
                stroke.move_to(sx[i], sy[i])
                stroke.line_to(sx[i + 1], sy[i + 1])

        if track.show_positions:
            for i in range(len(track.positions)):
                if not visible[i]:
                    continue
                with self.canvas.Fill(color=to_rgba(track.position_colors(i))) as fill:
                    fill.ellipse(sx[i], sy[i], track.show_positions_scale, track.show_positions_scale)

    def drawMarker(self):
        marker = self.iss_layer.marker
        if marker is None:
            return

        p = marker.position
        x, y, visible = self.view.project(p.latitude, p.longitude, p.altitude_m)
        if not visible:
            return

        if marker.line_enabled:
            gx, gy, _ = self.view.project(p.latitude, p.longitude)
            with self.canvas.Stroke(color=to_rgba(config.NADIR_LINE_COLOR), line_width=1.0) as stroke:
                stroke.move_to(gx, gy)
                stroke.line_to(x, y)

        with self.canvas.Fill(color=to_rgba(config.MARKER_COLOR)) as fill:
            fill.ellipse(x, y, config.MARKER_RADIUS, config.MARKER_RADIUS)

        with self.canvas.Fill(color=to_rgba(config.LABEL_COLOR)) as fill:
            fill.write_text(marker.label_text, x + 2 * config.MARKER_RADIUS, y - 2 * config.MARKER_RADIUS)

    def draw(self):
        self.canvas.context.clear()
        self.drawGlobe()
        self.drawGroundTrack()
        self.drawMarker()
        self.canvas.redraw()

    def on_press(self, widget: toga.Canvas, x: int, y: int, **_):
        self.prev_x_coord = x

    def on_drag(self, widget: toga.Canvas, x: int, y: int, **_):
        self.view.rotate(self.prev_x_coord - x)
        self.prev_x_coord = x
        self.draw()

    def on_alt_press(self, widget: toga.Canvas, x: int, y: int, **_):
        self.prev_y_coord = y

    def on_alt_drag(self, widget: toga.Canvas, x: int, y: int, **_):
        self.view.zoom(y - self.prev_y_coord)
        self.prev_y_coord = y
        self.draw()

    def on_resize(self, widget: toga.Canvas, width, height, **_):
        self.view.resize(width, height)
        self.draw()


def main():
    configure_logging()
    return ISSTracker(config.APP_NAME, config.APP_ID)


if __name__ == "__main__":
    main().main_loop()
