#!/usr/bin/env python3
"""Plot the temperature profile through the centre row."""

import matplotlib.pyplot as plt
import numpy as np

field = np.loadtxt("field.csv", delimiter=",")
plt.plot(field[field.shape[0] // 2])
plt.xlabel("x")
plt.ylabel("temperature")
plt.savefig("profile.png", dpi=150)
