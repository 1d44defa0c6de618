from os.path import dirname, join

from . import default_file_structures
from . import default_params
from . import soft_db_path

filepath = __file__
input_template_path = join(dirname(filepath),
                           "data_input.template")
