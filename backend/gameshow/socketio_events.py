from flask import current_app, request
from flask_socketio import emit

from gameshow import socketio
from gameshow.actions import EVENTS, parse_action
from gameshow.errors import GameError
from gameshow.services.games import Notifier, venue_room

NAMESPACE = '/'


class SocketIONotifier(Notifier):
    """Delivers engine events over Socket.IO: one room per venue for
    snapshot broadcasts, the connection's own sid for unicasts.
    """

    def __init__(self, sio=None, namespace: str = NAMESPACE):
        super().__init__()
        self.sio = sio or socketio
        self.namespace = namespace

    def emit_to(self, connection_id, event, payload=None):
        # Works from background tasks too: no request context needed
        if payload is None:
            self.sio.emit(event, to=connection_id, namespace=self.namespace)
        else:
            self.sio.emit(event, payload, to=connection_id, namespace=self.namespace)

    def broadcast(self, venue_id, event, payload):
        self.sio.emit(event, payload, to=venue_room(venue_id), namespace=self.namespace)

    def enter(self, connection_id, venue_id):
        self.sio.server.enter_room(connection_id, venue_room(venue_id), namespace=self.namespace)

    def leave(self, connection_id, venue_id):
        self.sio.server.leave_room(connection_id, venue_room(venue_id), namespace=self.namespace)


class Gateway:
    """Routes inbound Socket.IO events to the engine.

    Payloads are parsed into typed actions here; any ``GameError`` is
    reported to the requesting connection only.
    """

    def __init__(self, engine):
        self.engine = engine

    def handle_connect(self, auth=None):
        emit('connected', {'message': 'Connected', 'sid': request.sid})

    def handle_disconnect(self, *args):
        self.engine.disconnect(request.sid)

    def handle_action(self, event, data=None):
        sid = request.sid
        try:
            action = parse_action(event, data)
            self.engine.dispatch(sid, action)
        except GameError as exc:
            current_app.logger.info(f"[rejected] sid={sid} event={event} code={exc.code} message={exc.message!r}")
            emit('error', exc.to_dict())

    def handler_for(self, event):
        def _handler(data=None):
            self.handle_action(event, data)
        _handler.__name__ = f'handle_{event}'
        return _handler


def register_socketio_handlers(gateway: Gateway, namespace: str = NAMESPACE) -> None:
    """Register Socket.IO event handlers for every inbound event."""
    socketio.on_event('connect', gateway.handle_connect, namespace=namespace)
    socketio.on_event('disconnect', gateway.handle_disconnect, namespace=namespace)
    for event in EVENTS:
        socketio.on_event(event, gateway.handler_for(event), namespace=namespace)
