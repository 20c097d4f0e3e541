# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
GridSlice — Engine Modules
  partition — cut lines → cell rectangles → Pieces
  refine    — split, batch split, crop and reorder Pieces
  export    — file naming, ZIP archive, collage
"""
