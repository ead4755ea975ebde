#!/usr/bin/env python3
"""Plot total energy per step written by heat2d."""

import matplotlib.pyplot as plt
import numpy as np

data = np.loadtxt("energy.csv", delimiter=",", skiprows=1)
plt.plot(data[:, 0], data[:, 1])
plt.xlabel("step")
plt.ylabel("energy")
plt.savefig("energy.png", dpi=150)
