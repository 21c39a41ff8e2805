"""State/store layer.

This package is the single source of truth for how networked reports and
the local MPRIS projection are held, aged, and arbitrated into one
canonical now-playing snapshot.
"""
