from dataclasses import dataclass

DEFAULT_THEME = "Default"


@dataclass(frozen=True)
class Theme:
    name: str
    title_fg: str
    title_bg: str
    text: str
    selection: str
    muted: str
    error: str

    @property
    def title_style(self):
        return f"bold {self.title_fg} on {self.title_bg}"


class ThemeManager:
    @staticmethod
    def get_themes():
        return {
            "Default": {
                "title_fg": "#FAFAFA",
                "title_bg": "#7D56F4",
                "text": "#FAFAFA",
                "selection": "#7D56F4",
                "muted": "#BDBDBD",
                "error": "#FF5F87"
            },
            "Dark": {
                "title_fg": "#d4d4d4",
                "title_bg": "#264f78",
                "text": "#d4d4d4",
                "selection": "#569cd6",
                "muted": "#808080",
                "error": "#f44747"
            },
            "Light": {
                "title_fg": "#ffffff",
                "title_bg": "#0066b8",
                "text": "#000000",
                "selection": "#0066b8",
                "muted": "#6e6e6e",
                "error": "#c72e0f"
            }
        }

    @staticmethod
    def get_theme(theme_name):
        """Build the theme for a name, falling back to the default one"""
        themes = ThemeManager.get_themes()
        if theme_name not in themes:
            theme_name = DEFAULT_THEME
        return Theme(name=theme_name, **themes[theme_name])
