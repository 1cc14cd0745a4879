#
#    This file is part of pitrapez, parallel trapezoidal estimation of PI.
#
#    pitrapez is free software: you can redistribute it and/or modify
#    it under the terms of the GNU Lesser General Public License as
#    published by the Free Software Foundation, either version 3 of
#    the License, or (at your option) any later version.
#
#    pitrapez is distributed in the hope that it will be useful,
#    but WITHOUT ANY WARRANTY; without even the implied warranty of
#    MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
#    GNU Lesser General Public License for more details.
#
#    You should have received a copy of the GNU Lesser General Public
#    License along with pitrapez. If not, see <http://www.gnu.org/licenses/>.
#
import os
import copy
import pickle

import zmq

import pitrapez
from .exceptions import Shutdown, ReferenceBroken

# Worker messages
INIT = b"I"
REPLY = b"RP"

# Origin messages
TASK = b"T"
SHUTDOWN = b"S"


LINGER_TIME = 1000


def createZMQSocket(context, sock_type):
    """Create a socket of the given sock_type and deactivate message dropping"""
    sock = context.socket(sock_type)
    sock.setsockopt(zmq.LINGER, LINGER_TIME)

    # Remove message dropping
    sock.setsockopt(zmq.SNDHWM, 0)
    sock.setsockopt(zmq.RCVHWM, 0)

    # Don't accept unroutable messages
    if sock_type == zmq.ROUTER:
        sock.setsockopt(zmq.ROUTER_MANDATORY, 1)
    return sock


def dumps(element):
    try:
        return pickle.dumps(element, pickle.HIGHEST_PROTOCOL)
    except (pickle.PicklingError, TypeError, AttributeError) as e:
        raise ReferenceBroken("This element could not be pickled: "
                              "{0} ({1}).".format(element, e))


def loads(data):
    try:
        return pickle.loads(data)
    except (AttributeError, ImportError) as e:
        pitrapez.logger.error(
            "An instance could not find its base reference on a worker. "
            "Ensure that your objects have their definition available in "
            "an importable module.\n{error}".format(
                error=e,
            )
        )
        raise ReferenceBroken(e)


class OriginCommunicator(object):
    """Socket of the origin. Hands futures to the workers and collects their
    replies."""

    def __init__(self, hostname="127.0.0.1"):
        self.ZMQcontext = zmq.Context()
        self.socket = createZMQSocket(self.ZMQcontext, zmq.ROUTER)
        self.port = self.socket.bind_to_random_port(
            "tcp://{0}".format(hostname),
        )
        self.address = "tcp://{0}:{1}".format(hostname, self.port)

        self.poller = zmq.Poller()
        self.poller.register(self.socket, zmq.POLLIN)

    def _poll(self, timeout):
        return self.poller.poll(timeout)

    def recvIncoming(self):
        """Yields a (category, worker, future) tuple for every message
        waiting on the socket. The future is None for an INIT."""
        while self.socket.poll(0):
            msg = self.socket.recv_multipart()
            worker, category = msg[0], msg[1]
            if category == INIT:
                yield INIT, worker, None
            elif category == REPLY:
                yield REPLY, worker, loads(msg[3])
            else:
                pitrapez.logger.warning(
                    "Unrecognized message {0!r} from worker {1}".format(
                        category,
                        worker,
                    )
                )

    def sendFuture(self, worker, future):
        """Send a Future to be executed by the given worker."""
        future = copy.copy(future)
        future.greenlet = None
        future.children = {}
        future.callback = []
        self.socket.send_multipart([
            worker,
            TASK,
            dumps(future),
        ])

    def sendShutdown(self, worker):
        try:
            self.socket.send_multipart([worker, SHUTDOWN])
        except zmq.ZMQError as e:
            # Worker already disconnected
            pitrapez.logger.debug(
                "Could not send shutdown to worker {0}: {1}".format(worker, e)
            )

    def shutdown(self):
        if self.ZMQcontext and not self.ZMQcontext.closed:
            self.socket.close()
            self.ZMQcontext.term()


class WorkerCommunicator(object):
    """This class encapsulates the communication of a worker toward its
    origin."""

    def __init__(self, address, identity):
        self.ZMQcontext = zmq.Context()
        self.socket = createZMQSocket(self.ZMQcontext, zmq.DEALER)
        self.socket.setsockopt(zmq.IDENTITY, identity)
        self.socket.connect(address)
        self.parentPid = os.getppid()

    def sendReady(self):
        """Advertise the origin that this worker can take a future."""
        self.socket.send(INIT)

    def recvFuture(self):
        """Block until the origin sends a future and return it. Raises
        Shutdown when the origin asks to stop or has vanished."""
        while not self.socket.poll(pitrapez.POLLING_TIME):
            if os.getppid() != self.parentPid:
                raise Shutdown("Origin process vanished")
        msg = self.socket.recv_multipart()
        if msg[0] == SHUTDOWN:
            raise Shutdown("Shutdown received")
        assert msg[0] == TASK, "Unrecognized incoming message"
        return loads(msg[1])

    def sendResult(self, future):
        """Send a terminated future back to the origin."""
        future = copy.copy(future)

        # Remove the (now) extraneous elements from future class
        future.callable = future.args = future.kargs = future.greenlet = None

        try:
            payload = dumps(future)
        except ReferenceBroken:
            # The raised exception itself could not travel
            future.exceptionValue = RuntimeError(future.exceptionTraceback)
            payload = dumps(future)
        self.socket.send_multipart([
            REPLY,
            dumps(future.id),
            payload,
        ])

    def shutdown(self):
        if self.ZMQcontext and not self.ZMQcontext.closed:
            self.socket.close()
            self.ZMQcontext.term()
