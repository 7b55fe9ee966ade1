"""Simulation configuration with sensible defaults."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SimulationConfig:
    """Immutable configuration for the simulation run."""

    # World
    world_seed: int = 42
    grid_width: int = 50
    grid_height: int = 50

    # Timing
    max_ticks: int = 5000
    status_interval: int = 100          # Ticks between status log lines

    # Population (fixed quotas, harvesters are filled first)
    harvester_quota: int = 10
    builder_quota: int = 2
    worker_work_parts: int = 1
    worker_carry_parts: int = 1
    worker_move_parts: int = 2
    worker_lifetime: int = 1500         # Ticks a worker lives after spawning

    # Body part costs (energy drawn from the spawn)
    work_part_cost: int = 100
    carry_part_cost: int = 50
    move_part_cost: int = 50
    carry_part_capacity: int = 50

    # Work rates per WORK part per tick
    harvest_power: int = 2
    upgrade_power: int = 1
    build_power: int = 5

    # Interaction ranges (Manhattan steps)
    gather_range: int = 1
    transfer_range: int = 1
    build_range: int = 3
    improve_range: int = 3

    # Movement
    path_max_nodes: int = 2500          # A* tiles explored per search before giving up

    # Resource nodes
    num_sources: int = 2
    source_capacity: int = 3000
    source_regen_ticks: int = 300

    # Facilities
    spawn_capacity: int = 300
    spawn_initial_energy: int = 300
    extension_capacity: int = 50

    # Construction
    initial_construction_sites: int = 5
    extension_build_cost: int = 3000
    road_build_cost: int = 300

    # Improvement objective: progress needed per controller level
    controller_progress_table: tuple = (200, 45000, 135000, 405000, 1215000, 3645000, 10935000)

    # Debug
    annotate_routes: bool = False       # Emit route annotations on moves

    # Logging
    log_level: str = "INFO"
    replay_file: str = "replay.json"

    def __post_init__(self) -> None:
        if self.grid_width < 5 or self.grid_height < 5:
            raise ValueError("grid must be at least 5x5")
        if self.harvester_quota < 0 or self.builder_quota < 0:
            raise ValueError("population quotas must be non-negative")
        if self.worker_carry_parts < 0 or self.worker_work_parts < 0:
            raise ValueError("body part counts must be non-negative")
        if self.path_max_nodes <= 0:
            raise ValueError("path_max_nodes must be positive")
        if self.source_regen_ticks <= 0:
            raise ValueError("source_regen_ticks must be positive")
        if not self.controller_progress_table:
            raise ValueError("controller_progress_table must not be empty")

    @property
    def population_target(self) -> int:
        return self.harvester_quota + self.builder_quota

    @property
    def worker_body_cost(self) -> int:
        return (
            self.worker_work_parts * self.work_part_cost
            + self.worker_carry_parts * self.carry_part_cost
            + self.worker_move_parts * self.move_part_cost
        )
