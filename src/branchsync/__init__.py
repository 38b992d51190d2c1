"""Git branch reconciliation tool.

Features:
- Pick the remote to reconcile against (upstream, github, origin, ...)
- Fast-forward local branches that are behind their upstream
- Delete local branches whose upstream is gone and whose work has landed
- Warn about branches carrying unpushed or unmerged commits
- Preview planned actions without touching any branch
"""

__version__ = "0.1.0"
