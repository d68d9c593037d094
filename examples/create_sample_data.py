"""Crée des listes d'URL de démonstration et un config.json pour LaPasserelle."""

import json
from pathlib import Path

import pandas as pd

DATA_DIR = Path(__file__).parent / "data"
DATA_DIR.mkdir(exist_ok=True)

old_urls = pd.DataFrame({
    "sku": ["KP.10.01", "KP.10.02", "", "", "", "", ""],
    "url": [
        "/product/stretch-wrap-80-gauge",
        "/product/packing-tape-2-inch",
        "/product/steel-box-24x18x12",
        "/product/poly-mailer-10x13",
        "/product-category/corrugate",
        "/product-category/seasonal/",
        "/about-us",
    ],
})

new_urls = pd.DataFrame({
    "sku": ["KP.10.01", "", "", ""],
    "url": [
        "https://new.example.com/products/stretch-film-80g",
        "https://new.example.com/products/packing-tape",
        "https://new.example.com/products/steel-box",
        "https://new.example.com/products/poly-mailer-bag",
    ],
})

old_urls.to_csv(DATA_DIR / "old-urls.csv", index=False)
new_urls.to_csv(DATA_DIR / "new-urls.csv", index=False)

config = {
    "old_file": "data/old-urls.csv",
    "new_file": "data/new-urls.csv",
    "output_dir": "out",
    "new_site_base_url": "https://new.example.com",
}
(Path(__file__).parent / "config.json").write_text(json.dumps(config, indent=2), encoding="utf-8")
print(f"Fichiers créés dans {DATA_DIR}")
