#!/usr/bin/env python3
"""Plot the final temperature field written by heat2d."""

import matplotlib.pyplot as plt
import numpy as np

field = np.loadtxt("field.csv", delimiter=",")
plt.imshow(field, cmap="inferno")
plt.colorbar(label="temperature")
plt.savefig("field.png", dpi=150)
