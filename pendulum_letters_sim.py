import logging
import tkinter as tk
from datetime import datetime
from tkinter import ttk, messagebox

import matplotlib.animation as animation
from matplotlib.backend_bases import MouseButton
from matplotlib.backends.backend_tkagg import FigureCanvasTkAgg
from matplotlib.figure import Figure

from drawing_session import SessionRegistry
from logging_config import setup_logging
from sketch_config import AMPLITUDE_STEP, GRAVITY_STEP, parse_args
from sketch_render import SketchRenderer, configure_axes

logger = logging.getLogger(__name__)

FRAME_INTERVAL_MS = 25


def snapshot_filename(now=None):
    """PNG file name from the current time, e.g. 261019_134502.png"""
    now = now or datetime.now()
    return now.strftime('%y%m%d_%H%M%S') + '.png'


class PendulumLettersApp:
    def __init__(self, root, params, seed=None):
        self.root = root
        self.root.title("Pendulum Letters")
        self.root.geometry("1500x850")
        self.root.minsize(900, 600)

        self.params = params
        self.registry = SessionRegistry(params, seed=seed)

        # Create GUI first
        self.create_widgets()

        # Frame ticks and input events all run on the Tk main loop
        self.setup_animation()

        self.root.protocol("WM_DELETE_WINDOW", self.on_closing)

    def create_widgets(self):
        """Create the main GUI layout"""
        main_frame = ttk.Frame(self.root)
        main_frame.pack(fill=tk.BOTH, expand=True, padx=10, pady=10)

        # Right side - parameter panel (pack first to maintain width)
        right_frame = ttk.Frame(main_frame, width=300)
        right_frame.pack(side=tk.RIGHT, fill=tk.Y, padx=(10, 0))
        right_frame.pack_propagate(False)

        # Left side - drawing surface (fills remaining space)
        left_frame = ttk.Frame(main_frame)
        left_frame.pack(side=tk.LEFT, fill=tk.BOTH, expand=True)

        self.fig = Figure(figsize=(11, 9), facecolor='white')
        self.ax = self.fig.add_axes([0, 0, 1, 1])
        configure_axes(self.ax, 1100, 900)
        self.renderer = SketchRenderer(self.ax, self.params.font)

        # Embed matplotlib in tkinter
        self.canvas = FigureCanvasTkAgg(self.fig, master=left_frame)
        canvas_widget = self.canvas.get_tk_widget()
        canvas_widget.pack(fill=tk.BOTH, expand=True)
        self.canvas.draw()

        self.create_parameter_panel(right_frame)

        # Pointer and keyboard input
        self.canvas.mpl_connect('button_press_event', self.on_mouse_press)
        self.canvas.mpl_connect('motion_notify_event', self.on_mouse_motion)
        self.canvas.mpl_connect('button_release_event', self.on_mouse_release)
        self.canvas.mpl_connect('key_press_event', self.on_key_press)
        self.canvas.mpl_connect('resize_event', self.on_resize)

    def create_parameter_panel(self, parent):
        """Create the visibility switches and parameter controls"""
        title_label = ttk.Label(parent, text="Parameters", font=('Arial', 18, 'bold'))
        title_label.pack(pady=(0, 20))

        style = ttk.Style()
        style.configure('Title.TLabelframe.Label', font=('Arial', 12, 'bold'))
        style.configure('Button.TButton', font=('Arial', 10))

        # Visibility switches (keys 1, 2, 3)
        show_frame = ttk.LabelFrame(parent, text="Show", padding=10)
        show_frame.configure(style='Title.TLabelframe')
        show_frame.pack(fill=tk.X, pady=(0, 20))

        self.toggle_vars = {}
        for name, label in [('show_path', "Path (1)"),
                            ('show_pendulum', "Pendulum (2)"),
                            ('show_trail', "Letters (3)")]:
            var = tk.BooleanVar(value=getattr(self.params, name))
            ttk.Checkbutton(show_frame, text=label, variable=var,
                            command=lambda n=name: self.toggle(n)).pack(anchor=tk.W)
            self.toggle_vars[name] = var

        # Amplitude and gravity with +/- buttons
        params_frame = ttk.LabelFrame(parent, text="Pendulum", padding=10)
        params_frame.configure(style='Title.TLabelframe')
        params_frame.pack(fill=tk.X, pady=(0, 20))

        self.amplitude_var = tk.StringVar()
        self.gravity_var = tk.StringVar()
        rows = [
            (self.amplitude_var, lambda: self.change_amplitude(-AMPLITUDE_STEP),
             lambda: self.change_amplitude(AMPLITUDE_STEP)),
            (self.gravity_var, lambda: self.change_gravity(-GRAVITY_STEP),
             lambda: self.change_gravity(GRAVITY_STEP)),
        ]
        for var, decrease, increase in rows:
            row_frame = ttk.Frame(params_frame)
            row_frame.pack(fill=tk.X, pady=2)
            ttk.Label(row_frame, textvariable=var, width=18, font=('Arial', 12)).pack(side=tk.LEFT)
            ttk.Button(row_frame, text="+", width=3, command=increase).pack(side=tk.RIGHT)
            ttk.Button(row_frame, text="-", width=3, command=decrease).pack(side=tk.RIGHT)
        self.update_parameter_labels()

        controls_frame = ttk.LabelFrame(parent, text="Sketch", padding=10)
        controls_frame.configure(style='Title.TLabelframe')
        controls_frame.pack(fill=tk.X, pady=(0, 20))

        button_frame = ttk.Frame(controls_frame)
        button_frame.pack(fill=tk.X, pady=2)
        ttk.Button(button_frame, text="Reset", command=self.reset,
                   style='Button.TButton', width=8).pack(side=tk.LEFT, padx=(0, 5))
        ttk.Button(button_frame, text="Save PNG", command=self.save_snapshot,
                   style='Button.TButton', width=10).pack(side=tk.LEFT, padx=5)

        self.status_label = ttk.Label(controls_frame, text="Sessions: 0", font=('Arial', 11))
        self.status_label.pack(anchor=tk.W, pady=(10, 0))

        help_text = ("Drag to draw a path.\n"
                     "Up/Down: amplitude, Left/Right: gravity\n"
                     "S: save PNG, Space: clear")
        ttk.Label(parent, text=help_text, font=('Arial', 10), justify=tk.LEFT).pack(anchor=tk.W)

    def update_parameter_labels(self):
        self.amplitude_var.set(f"Amplitude: {self.params.amplitude:g}")
        self.gravity_var.set(f"Gravity: {self.params.gravity:.3f}")

    def setup_animation(self):
        """Setup the frame loop"""
        def animate(frame):
            self.registry.tick()
            artists = self.renderer.draw(self.registry.frame())
            self.status_label.config(text=f"Sessions: {len(self.registry)}")
            return artists

        self.ani = animation.FuncAnimation(
            self.fig, animate, interval=FRAME_INTERVAL_MS,
            blit=False, cache_frame_data=False
        )

    def toggle(self, name):
        """Flip a visibility switch and keep the checkbutton in sync"""
        value = self.params.toggle(name)
        self.toggle_vars[name].set(value)

    def change_amplitude(self, step):
        """Amplitude only applies to paths drawn afterwards"""
        self.params.change_amplitude(step)
        self.update_parameter_labels()

    def change_gravity(self, step):
        self.params.change_gravity(step)
        self.update_parameter_labels()

    def reset(self):
        """Remove all drawn paths"""
        self.registry.reset()
        self.renderer.clear()
        self.canvas.draw_idle()

    def save_snapshot(self, filename=None):
        """Export the current frame as a PNG, reporting failures to the user"""
        filename = filename or snapshot_filename()
        try:
            self.fig.savefig(filename, dpi=self.fig.dpi, facecolor='white')
        except OSError as e:
            logger.exception("Could not save %s", filename)
            messagebox.showerror("Save failed", str(e))
            return None
        logger.info("Saved %s", filename)
        return filename

    def on_mouse_press(self, event):
        """Start a new path"""
        if event.button != MouseButton.LEFT:
            return
        if event.inaxes == self.ax and event.xdata is not None and event.ydata is not None:
            # Take the keyboard focus away from the panel widgets
            self.canvas.get_tk_widget().focus_set()
            self.registry.press(event.xdata, event.ydata)

    def on_mouse_motion(self, event):
        """Extend the live path while the button is held"""
        if self.registry.live is not None and event.xdata is not None and event.ydata is not None:
            self.registry.drag(event.xdata, event.ydata)

    def on_mouse_release(self, event):
        """Finish the live path"""
        if event.button == MouseButton.LEFT:
            self.registry.release()

    def on_key_press(self, event):
        """Keyboard shortcuts of the sketch"""
        key = event.key
        if key in ('s', 'S'):
            self.save_snapshot()
        elif key == ' ':
            self.reset()
        elif key == '1':
            self.toggle('show_path')
        elif key == '2':
            self.toggle('show_pendulum')
        elif key == '3':
            self.toggle('show_trail')
        elif key == 'up':
            self.change_amplitude(AMPLITUDE_STEP)
        elif key == 'down':
            self.change_amplitude(-AMPLITUDE_STEP)
        elif key == 'left':
            self.change_gravity(-GRAVITY_STEP)
        elif key == 'right':
            self.change_gravity(GRAVITY_STEP)

    def on_resize(self, event):
        """Keep one data unit per pixel when the window changes size"""
        configure_axes(self.ax, event.width, event.height)

    def on_closing(self):
        """Handle window closing"""
        try:
            if hasattr(self, 'ani'):
                self.ani.event_source.stop()
            self.canvas.get_tk_widget().destroy()
        finally:
            self.root.destroy()


def main(argv=None):
    params, args = parse_args(argv)
    setup_logging(args.log_level, args.log_file)
    logger.info("Starting with %s", params)

    root = tk.Tk()
    app = PendulumLettersApp(root, params, seed=args.seed)
    root.mainloop()
    return app


if __name__ == "__main__":
    main()
