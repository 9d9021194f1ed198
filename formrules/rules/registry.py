from __future__ import annotations

import logging
from pathlib import Path

from ..errors import ClusterDefinitionError, UnknownClusterError
from .check import check_cluster, has_errors
from .load import load_builtin_clusters, load_cluster_dir
from .schema import ClusterDef, DefinitionIssue

logger = logging.getLogger(__name__)


class ClusterRegistry:
    """
    Cluster definitions available to an application.

    Built once at startup. Construction fails if any definition has an
    error-level issue, so a bad rule never reaches a request.
    """

    def __init__(self, clusters: dict[str, ClusterDef], *, strict: bool = True):
        self._clusters = dict(clusters)
        self.issues: list[DefinitionIssue] = []
        for definition in self._clusters.values():
            self.issues.extend(check_cluster(definition))

        for issue in self.issues:
            if issue.level == "warning":
                logger.warning("%s", issue)

        if strict and has_errors(self.issues):
            errors = "; ".join(str(i) for i in self.issues if i.level == "error")
            raise ClusterDefinitionError(f"Invalid cluster definitions: {errors}")

    @classmethod
    def load(cls, extra_dirs: list[Path] | None = None, *, include_builtin: bool = True, strict: bool = True) -> "ClusterRegistry":
        """Builtin definitions first; later directories replace clusters with the same id."""
        clusters: dict[str, ClusterDef] = load_builtin_clusters() if include_builtin else {}
        for directory in extra_dirs or []:
            if not directory.is_dir():
                raise ClusterDefinitionError(f"Cluster directory not found: {directory}")
            for cluster_id, definition in load_cluster_dir(directory).items():
                if cluster_id in clusters:
                    logger.info("Cluster %s overridden by %s", cluster_id, directory)
                clusters[cluster_id] = definition
        return cls(clusters, strict=strict)

    def get(self, cluster_id: str) -> ClusterDef:
        try:
            return self._clusters[cluster_id]
        except KeyError:
            raise UnknownClusterError(cluster_id) from None

    def __contains__(self, cluster_id: object) -> bool:
        return cluster_id in self._clusters

    def __iter__(self):
        return iter(sorted(self._clusters.values(), key=lambda c: c.cluster_id))

    def __len__(self) -> int:
        return len(self._clusters)
