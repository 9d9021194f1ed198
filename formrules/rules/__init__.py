"""Declarative cluster definitions (rules as data, predicates as code)."""

from .check import check_cluster
from .load import load_builtin_clusters, load_cluster
from .registry import ClusterRegistry

__all__ = ["ClusterRegistry", "check_cluster", "load_builtin_clusters", "load_cluster"]
