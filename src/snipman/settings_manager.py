import json
import os
import sys


class SettingsManager:
    def __init__(self, settings_file=None):
        self.settings_file = settings_file or os.path.join(
            os.path.expanduser("~"), ".snipman_settings.json"
        )
        self.settings = self.load_settings()

    def load_settings(self):
        """Load all settings with defaults"""
        default_settings = {
            "snippets_file": "snippets.txt",
            "log_file": "debug.log",
            "theme": "Default",
            "editor_width": 40,
            "editor_height": 10,
            "show_line_numbers": True
        }

        try:
            if os.path.exists(self.settings_file):
                with open(self.settings_file, 'r', encoding='utf-8') as f:
                    saved_settings = json.load(f)
                    if isinstance(saved_settings, dict):
                        # Merge saved settings with defaults
                        return {**default_settings, **saved_settings}
                    print(f"Ignoring settings in {self.settings_file}: not a JSON object",
                          file=sys.stderr)
        except (OSError, json.JSONDecodeError) as e:
            # Logging isn't set up yet, the log file path comes from here
            print(f"Failed to load settings: {str(e)}", file=sys.stderr)

        return default_settings

    def get_setting(self, key, default=None):
        """Get a setting value with a default fallback"""
        return self.settings.get(key, default)

    def get_snippets_file(self):
        return self.settings["snippets_file"]

    def get_log_file(self):
        return self.settings["log_file"]

    def get_theme(self):
        return self.settings["theme"]

    def override(self, **values):
        """Apply command line overrides, ignoring unset ones"""
        self.settings.update({k: v for k, v in values.items() if v is not None})
