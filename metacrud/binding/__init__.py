##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other Metacrud
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to Metacrud.
##############################################################################

"""
Turns submitted form input into record field values.

Modules:
    form_binder: Contains `FormDataBinder`.
"""

from metacrud.binding.form_binder import FormDataBinder


__all__ = ["FormDataBinder"]
