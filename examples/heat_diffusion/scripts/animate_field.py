#!/usr/bin/env python3
"""Render the final field as a rotating surface animation."""

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.animation import FuncAnimation

field = np.loadtxt("field.csv", delimiter=",")
x, y = np.meshgrid(np.arange(field.shape[1]), np.arange(field.shape[0]))
fig = plt.figure()
ax = fig.add_subplot(projection="3d")
ax.plot_surface(x, y, field, cmap="inferno")


def rotate(angle):
    ax.view_init(elev=30, azim=angle)


FuncAnimation(fig, rotate, frames=range(0, 360, 4)).save("field.gif", fps=20)
