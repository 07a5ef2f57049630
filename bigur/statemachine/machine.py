'''Конечный автомат с одношаговой историей.'''

__author__ = 'Gennady Kovalev <gik@bigur.ru>'
__copyright__ = '(c) 2016-2018 Business group for development management'
__licence__ = 'For license information see LICENSE'

from logging import getLogger
from threading import RLock
from typing import Any, Dict, Hashable, List, Mapping, Optional, TypedDict


logger = getLogger('bigur.statemachine')


StateId = Hashable
EventId = Hashable

Transitions = Dict[EventId, StateId]


class StateConfig(TypedDict, total=False):
    transitions: Transitions


class Config(TypedDict):
    initial: StateId
    states: Dict[StateId, StateConfig]


class StateMachineError(Exception):
    pass


class InvalidConfigError(StateMachineError):
    pass


class UnknownStateError(StateMachineError):
    '''Запрошенное состояние отсутствует в конфигурации.'''
    def __init__(self, state: Any, event: Any = None):
        self.state = state
        self.event = event
        if event is None:
            message = 'неизвестное состояние {!r}'.format(state)
        else:
            message = 'нет перехода по событию {!r} из состояния {!r}'.format(
                event, state)
        super().__init__(message)


class StateMachine(object):
    '''Конечный автомат, управляемый событиями.

    Конфигурация задаётся словарём::

        {'initial': 'idle',
         'states': {'idle': {'transitions': {'start': 'running'}},
                    'running': {'transitions': {'stop': 'idle'}}}}

    Вместо передачи в конструктор конфигурацию можно объявить
    атрибутом класса ``config`` в потомке.

    Автомат помнит одно предыдущее и одно следующее состояние, что
    позволяет отменить и повторить последний переход.'''

    config: Optional[Config] = None

    def __init__(self, config: Optional[Config] = None):
        if config is None:
            config = self.config
        if not config:
            raise InvalidConfigError('не задана конфигурация автомата')

        states = config.get('states')
        if not isinstance(states, Mapping):
            raise InvalidConfigError('необходимо определить состояния '
                                     'для {}'.format(type(self).__name__))

        self._states: Dict[StateId, Optional[Transitions]] = {}
        for state, value in states.items():
            if value is None:
                self._states[state] = None
            else:
                self._states[state] = dict(value.get('transitions') or {})

        self._lock = RLock()

        self.initial: StateId = config.get('initial')
        self.current_state: StateId = self.initial
        self.previous_state: Optional[StateId] = None
        self.future_state: Optional[StateId] = None

        logger.debug('Автомат %s создан, состояния: %s',
                     self, list(self._states))

    def __repr__(self):
        return '<{} state={!r}>'.format(type(self).__name__,
                                         self.current_state)

    @property
    def state(self) -> StateId:
        return self.current_state

    def get_state(self) -> StateId:
        '''Возвращает текущее состояние.'''
        return self.current_state

    def _is_known(self, state: StateId) -> bool:
        return self._states.get(state) is not None

    @staticmethod
    def _has_target(target: Optional[StateId]) -> bool:
        # пустая строка означает отсутствие перехода
        return target is not None and target != ''

    def change_state(self, state: StateId):
        '''Переводит автомат в указанное состояние.'''
        with self._lock:
            if not self._is_known(state):
                raise UnknownStateError(state)
            logger.debug('Смена состояния %s: %r -> %r',
                         self, self.current_state, state)
            self.previous_state = self.current_state
            self.current_state = state

    def trigger(self, event: EventId):
        '''Меняет состояние по правилам перехода для события.'''
        with self._lock:
            transitions = self._states.get(self.current_state) or {}
            target = transitions.get(event)
            if not self._has_target(target):
                raise UnknownStateError(self.current_state, event)
            self.change_state(target)

    def reset(self):
        '''Возвращает автомат в начальное состояние.'''
        with self._lock:
            logger.debug('Сброс автомата %s в %r', self, self.initial)
            self.previous_state = self.current_state
            self.current_state = self.initial

    def get_states(self, event: Optional[EventId] = None) -> List[StateId]:
        '''Возвращает список состояний, для которых определён переход
        по событию ``event``. Если событие не указано, возвращает все
        состояния.'''
        if not event:
            return list(self._states)
        return [state for state, transitions in self._states.items()
                if transitions and self._has_target(transitions.get(event))]

    def undo(self) -> bool:
        '''Возвращает автомат в предыдущее состояние. Если отмена
        невозможна, возвращает ``False``.'''
        with self._lock:
            if self.previous_state is None:
                return False
            if self.previous_state == self.current_state:
                return False
            logger.debug('Отмена перехода %s: %r -> %r',
                         self, self.current_state, self.previous_state)
            self.future_state = self.current_state
            self.current_state = self.previous_state
            return True

    def redo(self) -> bool:
        '''Повторяет отменённый переход. Если повтор невозможен,
        возвращает ``False``.'''
        with self._lock:
            if self.future_state is None:
                return False
            if self.future_state == self.current_state:
                return False
            logger.debug('Повтор перехода %s: %r -> %r',
                         self, self.current_state, self.future_state)
            self.current_state = self.future_state
            return True

    def clear_history(self):
        with self._lock:
            logger.debug('Очистка истории автомата %s', self)
            self.previous_state = None
            self.future_state = None
