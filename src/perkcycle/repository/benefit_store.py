import json
from pathlib import Path

from perkcycle.domain.models import CardConfig


class BenefitStore:
    def __init__(self, store_file: str | Path):
        self.store_file = Path(store_file)

    def load_cards(self) -> list[CardConfig]:
        if not self.store_file.exists():
            raise FileNotFoundError(f"Benefit store file not found: {self.store_file}")

        with self.store_file.open("r", encoding="utf-8") as fh:
            data = json.load(fh)

        return [CardConfig.model_validate(item) for item in data]
