# This file is part of FragQuant.
#
# Licensed under MIT License.
