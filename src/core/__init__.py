"""
Core numeric kernel for quantum-mechanical computation.

Complex arithmetic, 3D vector algebra, dense complex matrices and the
probability model of measurement. Independent of the simulation,
experiment and presentation layers that consume it.
"""
