"""Test package for spidercluster.

This package contains:
- Unit tests (test_layout.py, test_projection.py, test_state.py, test_options.py)
- Interaction tests for the cluster manager (test_manager.py)
- Layout service tests (test_actions.py)
- Test configuration and mock host collaborators (conftest.py)
"""
