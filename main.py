"""Simple entrypoint to draw a sample outfit locally."""

from kikonasu_app.app import KikonasuApp
from models.wardrobe_item import WardrobeItem
from models.weather import Weather

SAMPLE_WARDROBE = [
    WardrobeItem(item_id="top-1", category="Top"),
    WardrobeItem(item_id="top-2", category="Top"),
    WardrobeItem(item_id="bottom-1", category="Bottom"),
    WardrobeItem(item_id="dress-1", category="Dress"),
    WardrobeItem(item_id="shoes-1", category="Shoes"),
    WardrobeItem(item_id="coat-1", category="Outerwear"),
]


def main() -> None:
    app = KikonasuApp()
    print(app.todays_look(SAMPLE_WARDROBE, weather=Weather(temperature_celsius=9, condition="Clouds")))
    print(app.capsule_summary(SAMPLE_WARDROBE, SAMPLE_WARDROBE))


if __name__ == "__main__":
    main()
