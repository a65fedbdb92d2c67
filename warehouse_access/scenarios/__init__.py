# Warehouse Access - Demo Scenarios
# Demo accounts and scripted access checks

from .demo_data import load_demo_data, DEMO_USERS, DEMO_PASSWORD
from .test_scenarios import run_scenarios

__all__ = ['load_demo_data', 'DEMO_USERS', 'DEMO_PASSWORD', 'run_scenarios']
