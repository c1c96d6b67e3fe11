"""Fly - an arcade flight simulator.

The interesting parts live in two places:

- ``flysim.physics.flight_model.airplane``: the self-stabilizing flight
  dynamics integrator.
- ``flysim.camera.chase_camera``: the chase camera that smoothly tracks the
  airplane's heading.

Everything else (window, input, drawing, frame clock) drives those two.
"""

from flysim.version import __version__

__all__ = ["__version__"]
