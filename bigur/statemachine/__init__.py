'''Конечный автомат с отменой и повтором перехода.'''

__author__ = 'Gennady Kovalev <gik@bigur.ru>'
__copyright__ = '(c) 2016-2018 Business group for development management'
__licence__ = 'For license information see LICENSE'

from .machine import Config, StateConfig, Transitions
from .machine import StateMachineError, InvalidConfigError, UnknownStateError
from .machine import StateMachine
