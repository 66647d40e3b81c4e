"""Definitions of global constants used across symcanon."""


# site tolerance is the absolute tolerance passed to the pymatgen coord utils
# to determine site mappings and cluster equality. The default in pymatgen is
# 1E-8. If you want to tighten or loosen this tolerance, do it at runtime in
# your script by adding these lines somewhere at the top.
# import symcanon.constants as constants
# constants.SITE_TOL = your_desired_value
SITE_TOL = 1e-6

# symmetry precision and angle tolerance handed to spglib through the
# pymatgen SpacegroupAnalyzer when computing the factor group of a prim.
SYMPREC = 0.01
ANGLE_TOL = 5
