"""Cube definitions."""
import math
import numpy as np

NONE = -1

NUM_CORNERS = 8
NUM_EDGES = 12
NUM_CYCLE_SLOTS = 4
NUM_SLICE_EDGES = 4
NUM_FACELETS = 54

CORNER_MODULO = 3
EDGE_MODULO = 2

# corner slots, in slot index order
CORNER_NAMES = ("URF", "UFL", "ULB", "UBR", "DFR", "DLF", "DBL", "DRB")

# edge slots: top layer (0-3), middle layer / E slice (4-7), bottom layer (8-11)
EDGE_NAMES = ("UR", "UF", "UL", "UB", "FR", "FL", "BL", "BR", "DR", "DF", "DL", "DB")

SLICE_SLOTS = (4, 5, 6, 7)
UD_EDGE_SLOTS = (0, 1, 2, 3, 8, 9, 10, 11)

# facelet indexes: U 0-8, R 9-17, F 18-26, D 27-35, L 36-44, B 45-53
# the first facelet of a corner is its U/D facelet, the rest follow clockwise
CORNER_FACELETS = (
    (8, 9, 20), (6, 18, 38), (0, 36, 47), (2, 45, 11),
    (29, 26, 15), (27, 44, 24), (33, 53, 42), (35, 17, 51))
EDGE_FACELETS = (
    (5, 10), (7, 19), (3, 37), (1, 46),
    (23, 12), (21, 41), (50, 39), (48, 14),
    (32, 16), (28, 25), (30, 43), (34, 52))
CENTER_FACELETS = (4, 13, 22, 31, 40, 49)

CORNER_ORIENTATION_SIZE = CORNER_MODULO ** (NUM_CORNERS - 1)  # 2187
EDGE_ORIENTATION_SIZE = EDGE_MODULO ** (NUM_EDGES - 1)  # 2048
CORNER_PERMUTATION_SIZE = math.factorial(NUM_CORNERS)  # 40320
SLICE_COMBINATION_SIZE = math.comb(NUM_EDGES, NUM_SLICE_EDGES)  # 495
UD_EDGE_PERMUTATION_SIZE = math.factorial(len(UD_EDGE_SLOTS))  # 40320
SLICE_PERMUTATION_SIZE = math.factorial(NUM_SLICE_EDGES)  # 24

FACTORIAL = np.cumprod([1] + [*range(1, NUM_EDGES + 1)])
COMBINATION = np.array([[math.comb(n, k) for k in range(NUM_SLICE_EDGES + 1)] for n in range(NUM_EDGES + 1)])
