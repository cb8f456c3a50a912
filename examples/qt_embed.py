# test_example = false

"""
A qt app with a cloudscape inside and a button that moves the sun.
"""
import importlib

from wgpu_clouds import Cloudscape, CloudParams

# For the sake of making this example Just Work, we try multiple QT libs
for lib in ("PySide6", "PyQt6", "PySide2", "PyQt5"):
    try:
        QtWidgets = importlib.import_module(".QtWidgets", lib)
        break
    except ModuleNotFoundError:
        pass

from rendercanvas.qt import QRenderWidget  # noqa: E402


class CloudWindow(QtWidgets.QWidget):
    def __init__(self):
        super().__init__()
        self.setWindowTitle("Clouds in Qt")
        self.resize(800, 500)

        self.button = QtWidgets.QPushButton("Sunset", self)
        self.button.clicked.connect(self.toggle_sun)
        self.canvas = QRenderWidget(self, update_mode="continuous")

        layout = QtWidgets.QVBoxLayout()
        layout.addWidget(self.button)
        layout.addWidget(self.canvas, 1)
        self.setLayout(layout)

        self.scape = Cloudscape(canvas=self.canvas)
        self.sunset = False
        self.canvas.request_draw(self.scape._draw_frame)

    def toggle_sun(self):
        self.sunset = not self.sunset
        sun_y = 0.03 if self.sunset else 0.6
        self.scape.set_params(CloudParams(sun_y=sun_y))


app = QtWidgets.QApplication([])
window = CloudWindow()
window.show()

# Enter Qt event-loop (compatible with qt5/qt6)
app.exec() if hasattr(app, "exec") else app.exec_()
