"""Write a synthetic wine reviews CSV for local testing."""

import sys
from pathlib import Path

import numpy as np

from wine_browser.core.records import RecordStore, WineRecord

n_rows = int(sys.argv[1]) if len(sys.argv) > 1 else 5000
out_path = Path(sys.argv[2]) if len(sys.argv) > 2 else Path("data/winedata_mock.csv")

rng = np.random.default_rng(42)

countries = ["US", "France", "Italy", "Spain", "Portugal", "Chile", "Argentina", "Australia"]
varieties = [
    "Cabernet Sauvignon", "Malbec", "Bordeaux-style Red Blend", "Pinot Noir", "Syrah",
    "Grenache", "Merlot", "Tempranillo", "Red Blend", "Chardonnay", "Riesling",
]

points = np.clip(rng.normal(loc=88, scale=3, size=n_rows).round(), 80, 100).astype(int)
# price loosely follows points, with ~5% missing
price = np.exp(rng.normal(loc=3.3 + (points - 88) * 0.08, scale=0.5)).round().astype(int)
missing = rng.random(n_rows) < 0.05

store = RecordStore(
    WineRecord(
        country=str(country),
        variety=str(variety),
        points=int(p),
        price=None if gone else int(cost),
    )
    for country, variety, p, cost, gone in zip(
        rng.choice(countries, size=n_rows),
        rng.choice(varieties, size=n_rows),
        points,
        price,
        missing,
    )
)

df = store.to_frame()
out_path.parent.mkdir(exist_ok=True)
df.to_csv(out_path, index=False)
print("wrote", out_path, df.shape)
