"""Chase camera following the airplane."""

from flysim.camera.chase_camera import ChaseCamera, step_toward

__all__ = ["ChaseCamera", "step_toward"]
