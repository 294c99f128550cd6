"""
Example script demonstrating the consumption scheduler for one household.

The site definition in ``site.yaml`` describes a few appliances: scheduled ones
(boiler, fridge, washing machine, shower) and trigger-only ones (circulation pump,
dryer). The generator turns them into runs for one week of reference data and
plots when each appliance starts and how much power is drawn per line.
"""

import os

import matplotlib.pyplot as plt
import pandas as pd

from loadsched import Generator
from loadsched.constants import Columns as C

# Load data
cwd = os.path.dirname(os.path.abspath(__file__))
site_file = os.path.join(cwd, "site.yaml")

# Reference index, e.g. of an irradiation time series
index = pd.date_range("2024-06-03 04:00", "2024-06-09 22:00", freq="15min")

# Instantiate and configure the generator
gen = Generator()
gen.add_site_file(site_file, name="household")

# Generate runs
summary, runs = gen.generate(index, seed=42)

# Print summary
print("\nSummary:")
print(summary)

df = runs["household"]
print("\nFirst runs:")
print(df.head(10))

# Start times per appliance
fig, axes = plt.subplots(2, 1, figsize=(15, 9), sharex=True)
ax = axes[0]
first_segments = df[df[C.SEGMENT] == 0]
names = sorted(first_segments[C.NAME].unique())
for i, name in enumerate(names):
    starts = first_segments[first_segments[C.NAME] == name]
    ax.scatter(
        starts[C.DATETIME],
        [i] * len(starts),
        marker="^" if starts[C.TRIGGERED].any() else "o",
        label=name,
    )
ax.set_yticks(range(len(names)))
ax.set_yticklabels(names)
ax.set_title("Run starts (triangles: started by a trigger)")
ax.grid(True, alpha=0.3)

# Power drawn per source on the reference index
ax = axes[1]
for source, segments in df.groupby(C.SOURCE):
    load = pd.Series(0.0, index=index)
    for _, seg in segments.iterrows():
        end = seg[C.DATETIME] + pd.to_timedelta(seg[C.DURATION], unit="h")
        load[(index >= seg[C.DATETIME]) & (index < end)] += seg[C.POWER]
    ax.step(index, load, where="post", label=source)
ax.set_ylabel("Power (W)")
ax.set_title("Power per source")
ax.legend(loc="upper right")
ax.grid(True, alpha=0.3)

plt.tight_layout()
plt.show()
