'''
Settings, read from the environment (RPN12C_*).
'''

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix='RPN12C_', extra='ignore')

    # Display separators; swap them for 1.234,56 style.
    decimal_separator: str = '.'
    group_separator: str = ','

    state_file: str = '~/.rpn12c.json'
    prompt: str = '> '
    log_level: str = 'WARNING'


@lru_cache()
def get_settings():
    return Settings()
