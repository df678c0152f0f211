"""Release domain: version resolution, answer flow, planning and execution.

Dependency order (leaves first): semver -> answers -> planner -> pipeline,
tied together by ``service.run_release``.
"""

from __future__ import annotations
