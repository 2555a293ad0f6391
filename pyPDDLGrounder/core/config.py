from ast import literal_eval
import configparser
import os
from typing import Dict

from pyPDDLGrounder.core.debug.exception import PDDLConfigError
from pyPDDLGrounder.core.debug.logger import Logger

DEFAULT_CONFIG = os.path.join(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__))),
    'configs', 'default.cfg')

GROUNDER_KEYS = {'bound', 'distinct_constants'}
LOGGING_KEYS = {'log_file', 'clear'}


def _parse_config_file(path: str):
    if not os.path.isfile(path):
        raise PDDLConfigError(f'Config file <{path}> does not exist.')
    config = configparser.RawConfigParser()
    config.optionxform = str
    config.read(path)
    return config, _literal_args(config)


def _parse_config_string(value: str):
    config = configparser.RawConfigParser()
    config.optionxform = str
    config.read_string(value)
    return config, _literal_args(config)


def _literal_args(config):
    args = {}
    for section in config.sections():
        for (k, v) in config.items(section):
            try:
                args[k] = literal_eval(v)
            except (ValueError, SyntaxError) as error:
                raise PDDLConfigError(
                    f'Value <{v}> of <{k}> in section [{section}] is not '
                    f'a valid Python literal.') from error
    return args


def _section_args(config, args, section, keys):
    if not config.has_section(section):
        return {}
    section_args = {k: args[k] for (k, _) in config.items(section)}
    unknown = set(section_args) - keys
    if unknown:
        raise PDDLConfigError(
            f'Unknown key(s) {unknown} in section [{section}], '
            f'should be among {keys}.')
    return section_args


def _load_config(config, args) -> Dict[str, object]:
    grounder_args = _section_args(config, args, 'Grounder', GROUNDER_KEYS)
    logging_args = _section_args(config, args, 'Logging', LOGGING_KEYS)

    # the logger is built here and handed to the grounder
    log_file = logging_args.get('log_file', None)
    if log_file is not None:
        logger = Logger(log_file)
        if logging_args.get('clear', True):
            logger.clear()
        grounder_args['logger'] = logger
    return grounder_args


def load_config(path: str=DEFAULT_CONFIG) -> Dict[str, object]:
    '''Loads a config file at the specified file path, and returns the keyword
    arguments of the grounder.'''
    config, args = _parse_config_file(path)
    return _load_config(config, args)


def load_config_from_string(value: str) -> Dict[str, object]:
    '''Loads config file contents specified explicitly as a string value.'''
    config, args = _parse_config_string(value)
    return _load_config(config, args)
