"""Simulation of Lamport clocks and Lamport's distributed mutual exclusion algorithm."""

__version__ = "0.1.0"