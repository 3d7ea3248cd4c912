"""
Waterwheel Simulator
====================

A leaky-bucket waterwheel, the mechanical analogue of the Lorenz system.

Buckets are spaced evenly around the rim of a wheel.  A spigot at the top
fills whichever bucket passes beneath it, every bucket leaks in proportion
to the water it holds, and gravity acting on the uneven load turns the
wheel against viscous damping:

  - Moment of inertia grows with the water carried at the rim
  - Torque Σ r·g·mᵢ·sin θᵢ, minus damping proportional to ω
  - Smooth spigot profile so the derivative has no jumps
  - Fixed-step 4th-order Runge-Kutta driven by the frame clock

Depending on the fill, drain and damping the wheel settles, spins
steadily, or reverses direction chaotically.
"""

__version__ = "1.0.0"
__author__ = "Waterwheel Simulator"
