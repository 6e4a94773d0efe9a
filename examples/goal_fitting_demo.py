"""Goal fitting demo - fit goals from marker correspondences, relax them, and save them."""

from pathlib import Path
import logging

import numpy as np
from scipy.spatial.transform import Rotation

from ikgoal import IKGoal, RigidTransform
from ikgoal.io import GoalTextReader, GoalTextWriter

logger = logging.getLogger(__name__)


def generate_gripper_markers() -> np.ndarray:
    """
    Marker layout on a gripper link (link frame, meters).

    Returns:
        (5, 3) marker positions
    """
    return np.array([
        [0.00, 0.00, 0.00],
        [0.05, 0.00, 0.00],
        [0.00, 0.04, 0.00],
        [0.00, 0.00, 0.08],
        [0.03, 0.02, 0.05],
    ])


def observe_markers(
        *,
        local_markers: np.ndarray,
        pose: RigidTransform,
        noise_std: float,
        random_seed: int) -> np.ndarray:
    """
    Simulate world observations of link markers.

    Args:
        local_markers: (n_markers, 3) marker positions in the link frame
        pose: Link pose in the world
        noise_std: Standard deviation of Gaussian noise
        random_seed: Random seed for reproducibility

    Returns:
        (n_markers, 3) noisy world positions
    """
    rng = np.random.default_rng(seed=random_seed)
    world = local_markers @ pose.rotation.T + pose.translation
    return world + rng.normal(scale=noise_std, size=world.shape)


def run_goal_fitting_demo(*, output_dir: Path = Path("output/goal_fitting_demo")) -> None:
    """Run complete goal fitting demonstration."""

    logging.basicConfig(
        level=logging.INFO,
        format='%(levelname)-8s | %(name)-30s | %(message)s'
    )

    logger.info("=" * 80)
    logger.info("GOAL FITTING DEMO")
    logger.info("=" * 80)

    # 1. Observe markers of a link at a known pose
    true_pose = RigidTransform(
        rotation=Rotation.from_euler("xyz", [10.0, -20.0, 35.0], degrees=True).as_matrix(),
        translation=np.array([0.4, 0.1, 0.6])
    )
    local_markers = generate_gripper_markers()
    world_markers = observe_markers(
        local_markers=local_markers,
        pose=true_pose,
        noise_std=0.001,
        random_seed=42
    )
    logger.info(f"\nObserved {len(world_markers)} markers at pose {true_pose}")

    # 2. Fit goals using more and more markers
    goals = []
    for n_markers in range(len(local_markers) + 1):
        goal = IKGoal(link=6)
        goal.set_from_points(
            local_points=local_markers[:n_markers],
            world_points=world_markers[:n_markers],
            tolerance=1e-3
        )
        logger.info(f"  {n_markers} markers -> {goal}")
        goals.append(goal)

    full_goal = goals[-1]
    fitted_pose = full_goal.get_fixed_goal_transform()
    position_error, rotation_error = full_goal.get_error(relative_transform=true_pose)
    logger.info(f"\nFitted pose: {fitted_pose}")
    logger.info(f"  Position error at true pose: {np.linalg.norm(position_error) * 1000:.2f} mm")
    logger.info(f"  Rotation error at true pose: {np.degrees(np.linalg.norm(rotation_error)):.3f} deg")

    # 3. The contact starts pivoting about the world z axis, then slides along x
    full_goal.remove_rotation_axis(axis=np.array([0.0, 0.0, 1.0]))
    full_goal.remove_position_axis(direction=np.array([1.0, 0.0, 0.0]))
    logger.info(f"\nRelaxed goal: {full_goal}")

    candidate = RigidTransform.from_rotation_vector(
        rotation_vector=np.array([0.0, 0.0, 1.2]),
        translation=np.array([0.0, 0.0, 0.0])
    )
    projected = full_goal.get_closest_goal_transform(reference=candidate)
    position_error, rotation_error = full_goal.get_error(relative_transform=projected)
    logger.info(f"  Closest goal transform to {candidate}: {projected}")
    logger.info(f"  Residual there: position={position_error}, rotation={rotation_error}")

    # 4. Save and reload
    filepath = output_dir / "goals.txt"
    GoalTextWriter().write(filepath=filepath, data={"goals": goals + [full_goal]})
    data = GoalTextReader().read(filepath=filepath)
    logger.info(f"\nSaved and reloaded {data['n_goals']} goals from {filepath} (failed={data['failed']})")


if __name__ == "__main__":
    run_goal_fitting_demo()
