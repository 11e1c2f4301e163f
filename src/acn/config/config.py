"""
Loads layered configobj configuration files and applies them to module attributes.

For a configuration named `name` in `directory`, these files are merged in order, later files winning:

- `name.default.cfg`        defaults shipped with the package
- `name.<os>.cfg`           platform specific values (windows, osx, linux)
- `~/.acn/name.cfg`         the user's overrides
- `name.cfg`                local overrides beside the module

The result is validated against `name.schema.cfg`, which also converts values to their declared types.
"""
import logging
import os
import platform

from configobj import ConfigObj, ConfigObjError, Section, flatten_errors
from validate import Validator

logger = logging.getLogger(__name__)

# The default extension for configuration files
config_extension = '.cfg'

# the directory in the user's home holding override files
user_config_directory = os.path.join('~', '.acn')


def config_flavor(name, flavor=None):
    """
    >>> config_flavor('settings', 'default')
    'settings.default'
    >>> config_flavor('settings')
    'settings'
    """
    return name if not flavor else name + '.' + flavor


def config_filename(name, directory):
    """
    Determines the location of a config file in a directory.
    """
    return os.path.join(directory, name + config_extension)


def load_config_file_base(file, must_exist=True):
    """
    Loads a configuration file
    :param file:        The configuration file to load
    :param must_exist:  when True, the file must exist or an exception is thrown.
    :return: The ConfigObj instance for the file.
    """
    try:
        return ConfigObj(file, interpolation='Template', file_error=must_exist) \
            if must_exist or os.path.exists(file) else ConfigObj()
    except ConfigObjError as e:
        raise type(e)(str(e) + ' at ' + file)


def config_flavor_file(name, directory, flavor=None) -> ConfigObj:
    """
    Loads a specialization of a config file, if it exists. The file is named
    after the base, followed by a period and then the flavor.
    """
    return load_config_file_base(config_filename(config_flavor(name, flavor), directory), False)


def load_schema(name, directory):
    """
    Loads the validation schema. Checks such as float(min=0, default=1.0) contain commas,
    so the file is parsed as a configspec rather than as a list of values.
    """
    file = config_filename(config_flavor(name, 'schema'), directory)
    if not os.path.exists(file):
        return ConfigObj(_inspec=True)
    try:
        return ConfigObj(file, _inspec=True)
    except ConfigObjError as e:
        raise type(e)(str(e) + ' at ' + file)


def map_os_name(name):
    """
    >>> map_os_name('Windows')
    'windows'
    >>> map_os_name("Darwin")
    'osx'
    """
    name = name.lower()
    if name == 'darwin':
        name = 'osx'
    return name


def os_name():
    return map_os_name(platform.system())


def describe_errors(config, result):
    """ lists the keys that failed validation as 'section/key' strings. """
    failures = []
    for section_list, key, _ in flatten_errors(config, result):
        path = '/'.join(section_list + ([key] if key is not None else []))
        failures.append(path or '<root>')
    return failures


def load_config(name, directory, user_directory=user_config_directory):
    """
    Loads and validates all the configuration files that relate to the given name.
    :param name: the base name of the configuration files
    :param directory: the location of the packaged configuration files
    :param user_directory: the location of the user override file
    :return: the merged and validated ConfigObj
    """
    config = ConfigObj()
    config.merge(config_flavor_file(name, directory, 'default'))
    config.merge(config_flavor_file(name, directory, os_name()))
    config.merge(config_flavor_file(name, os.path.expanduser(user_directory)))
    config.merge(config_flavor_file(name, directory))

    config.configspec = load_schema(name, directory)
    result = config.validate(Validator(), preserve_errors=True)
    if result is not True:
        raise ConfigObjError("the config file %s failed validation: %s" %
                             (name, ', '.join(describe_errors(config, result))))
    return config


def fetch_conf_path(conf: Section, path):
    """
    Retrieves the named configuration section
    :param conf:        The root configuration
    :param path:        An iterable that lists the names of the nested sections to resolve
    :return: The configuration section identified by the path, or None
    """
    for p in path:
        conf = conf.get(p, None)
        if conf is None:
            return None
    return conf


def apply_conf(conf: Section, target):
    """
    Sets each attribute of the target that has the same name as a value in the configuration section.
    Values without a matching attribute are logged and ignored.
    """
    for k, v in conf.items():
        if isinstance(v, Section):
            continue
        if hasattr(target, k):
            setattr(target, k, v)
        else:
            logger.warning("ignoring unknown setting '%s'", k)


def apply_conf_path(conf: Section, name_parts, target):
    conf = fetch_conf_path(conf, name_parts)
    if conf:
        apply_conf(conf, target)


def configure_module(module, config_name=None, user_directory=user_config_directory):
    """
    Applies the configuration to the given module.

    The configuration is loaded from files named after the module, in the module's directory.
    The values applied are those in the section nested by the module's qualified name,
    e.g. [acn] [[settings]] for the module acn.settings.
    """
    fqname = module.__name__
    if not config_name:
        config_name = fqname.split('.')[-1]
    conf = load_config(config_name, os.path.dirname(module.__file__), user_directory)
    apply_conf_path(conf, fqname.split('.'), module)
    return conf
