import tkinter.colorchooser

import _tkinter
import customtkinter

from components.galaxy_parameters import (
    COLOR_FIELDS,
    INTEGER_FIELDS,
    PARAMETER_BOUNDS,
    InvalidParameters,
    color_to_hex,
)

# ------------------------------------------------------------------------------
# Appearance and Theming
# ------------------------------------------------------------------------------
customtkinter.set_appearance_mode("System")  # "System", "Dark", "Light"
customtkinter.set_default_color_theme("blue")

# Labels shown next to each slider, in panel order.
SLIDER_LABELS = {
    "count": "Count",
    "size": "Size",
    "radius": "Radius",
    "branches": "Branches",
    "spin": "Spin",
    "randomness": "Randomness",
    "randomness_power": "Randomness Power",
}

COLOR_LABELS = {
    "inside_color": "Inside Color",
    "outside_color": "Outside Color",
}


class ParameterPanel(customtkinter.CTk):
    """
    Tweak panel for the galaxy parameters, built with customtkinter.

    Dragging a slider only updates its value label. Releasing the mouse writes
    the value into the parameters and commits, which regenerates the galaxy.
    The panel does not run its own mainloop: the rendering loop calls update()
    once per frame.
    """

    def __init__(self, parameters, on_screenshot=None, on_close=None):
        """
        Args:
            parameters (GalaxyParameters): The parameter set to edit.
            on_screenshot (callable, optional): Called by the "Save Screenshot" button.
            on_close (callable, optional): Called by the "Exit" button or when the
                panel window is closed.
        """
        super().__init__()

        self.parameters = parameters
        self.on_screenshot = on_screenshot
        self.on_close = on_close

        self.sliders = {}
        self.value_labels = {}
        self.color_buttons = {}
        self.closed = False

        # ----------------------------------------------------------------------
        # Configure Window
        # ----------------------------------------------------------------------
        self.title("Galaxy Parameters")
        self.geometry("420x620")
        self.grid_columnconfigure(1, weight=1)
        self.protocol("WM_DELETE_WINDOW", self.exit_panel)

        # ----------------------------------------------------------------------
        # Sliders
        # ----------------------------------------------------------------------
        row = 0
        for name, text in SLIDER_LABELS.items():
            self._add_slider(row, name, text)
            row += 1

        # ----------------------------------------------------------------------
        # Colors
        # ----------------------------------------------------------------------
        for name, text in COLOR_LABELS.items():
            label = customtkinter.CTkLabel(self, text=f"{text}:", anchor="w")
            label.grid(row=row, column=0, padx=(20, 10), pady=8, sticky="w")

            button = customtkinter.CTkButton(self, text="", width=80, command=lambda n=name: self.pick_color(n))
            button.grid(row=row, column=1, columnspan=2, padx=(0, 20), pady=8, sticky="ew")
            self.color_buttons[name] = button
            row += 1

        # ----------------------------------------------------------------------
        # Actions
        # ----------------------------------------------------------------------
        self.regenerate_button = customtkinter.CTkButton(self, text="Regenerate", command=self.commit)
        self.regenerate_button.grid(row=row, column=0, columnspan=3, padx=20, pady=(20, 5), sticky="ew")
        row += 1

        self.screenshot_button = customtkinter.CTkButton(
            self, text="Save Screenshot", command=self.request_screenshot
        )
        self.screenshot_button.grid(row=row, column=0, columnspan=3, padx=20, pady=5, sticky="ew")
        row += 1

        self.appearance_mode_label = customtkinter.CTkLabel(self, text="Appearance Mode:", anchor="w")
        self.appearance_mode_label.grid(row=row, column=0, padx=(20, 10), pady=(10, 5), sticky="w")
        self.appearance_mode_optionemenu = customtkinter.CTkOptionMenu(
            self,
            values=["Dark", "Light"],
            command=self.change_appearance_mode_event,
        )
        self.appearance_mode_optionemenu.grid(row=row, column=1, columnspan=2, padx=(0, 20), pady=(10, 5), sticky="ew")
        row += 1

        self.exit_button = customtkinter.CTkButton(self, text="Exit", command=self.exit_panel)
        self.exit_button.grid(row=row, column=0, columnspan=3, padx=20, pady=(5, 20), sticky="ew")

        self.refresh()

    def _add_slider(self, row, name, text):
        lower, upper, step = PARAMETER_BOUNDS[name]

        label = customtkinter.CTkLabel(self, text=f"{text}:", anchor="w")
        label.grid(row=row, column=0, padx=(20, 10), pady=8, sticky="w")

        slider = customtkinter.CTkSlider(
            self,
            from_=lower,
            to=upper,
            number_of_steps=int(round((upper - lower) / step)),
            command=lambda value, n=name: self.show_value(n, value),
        )
        slider.grid(row=row, column=1, padx=0, pady=8, sticky="ew")
        slider.bind("<ButtonRelease-1>", lambda event, n=name: self.on_slider_release(n))

        value_label = customtkinter.CTkLabel(self, text="", width=70, anchor="e")
        value_label.grid(row=row, column=2, padx=(10, 20), pady=8, sticky="e")

        self.sliders[name] = slider
        self.value_labels[name] = value_label

    # --------------------------------------------------------------------------
    # Display
    # --------------------------------------------------------------------------
    def format_value(self, name, value):
        if name in INTEGER_FIELDS:
            return str(int(round(value)))
        return f"{value:.3f}"

    def show_value(self, name, value):
        """
        Slider drag callback: update the value label only.
        """
        self.value_labels[name].configure(text=self.format_value(name, value))

    def refresh(self):
        """
        Move every widget to the current parameter values.
        """
        for name, slider in self.sliders.items():
            value = getattr(self.parameters, name)
            slider.set(value)
            self.show_value(name, value)

        for name, button in self.color_buttons.items():
            hex_color = color_to_hex(getattr(self.parameters, name))
            button.configure(text=hex_color, fg_color=hex_color, hover_color=hex_color)

    # --------------------------------------------------------------------------
    # Edits
    # --------------------------------------------------------------------------
    def on_slider_release(self, name):
        """
        End of a slider drag: write the value and regenerate.
        """
        self.parameters.update(**{name: self.sliders[name].get()})
        self.commit()

    def pick_color(self, name):
        """
        Open a color chooser for one of the galaxy colors.
        """
        current = color_to_hex(getattr(self.parameters, name))
        _rgb, hex_color = tkinter.colorchooser.askcolor(color=current, title=COLOR_LABELS[name], parent=self)
        if hex_color is None:
            return
        self.parameters.update(**{name: hex_color})
        self.commit()

    def commit(self):
        """
        Notify the parameter observers. Invalid values are reported and the
        current galaxy stays on screen.
        """
        try:
            self.parameters.commit()
        except InvalidParameters as e:
            print(f"Galaxy not regenerated: {e}")
        self.refresh()

    # --------------------------------------------------------------------------
    # Actions
    # --------------------------------------------------------------------------
    def request_screenshot(self):
        if self.on_screenshot is not None:
            self.on_screenshot()

    def change_appearance_mode_event(self, new_appearance_mode: str):
        """
        Called when appearance mode is changed in the option menu (Dark/Light).
        """
        customtkinter.set_appearance_mode(new_appearance_mode)

    def exit_panel(self):
        """
        Close the panel and tell the owner the user asked to quit.
        """
        if self.on_close is not None:
            self.on_close()
        self.destroy()

    def destroy(self):
        """
        Destroy the window once; later calls are ignored.
        """
        if self.closed:
            return
        self.closed = True
        try:
            super().destroy()
        except _tkinter.TclError:
            pass
