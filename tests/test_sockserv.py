import pytest

from fnkrt import sockserv
from fnkrt.sockets import Socket
from fnkrt.sockserv import (
    SocketServer,
    SockServError,
    errctostr,
    read_write_buffer,
    write_read_buffer,
)


def test_errctostr_messages():
    assert errctostr(sockserv.ERRC_COULD_NOT_REMOVE_SOCKET) == "Can't remove a socket that is not bound"
    assert errctostr(sockserv.ERRC_RW_WOULDOVERFLOW) == "Attempted to write/read outside buffer"
    assert errctostr(sockserv.ERRC_NO_SOCKETS_BOUND) == "No sockets are bound to the server"
    assert errctostr(0) == "Ok"
    assert errctostr(sockserv.ERRC_NO_SOCKETS_BOUND + 1) is None


def test_empty_server_has_no_next():
    server = SocketServer()
    with pytest.raises(SockServError) as info:
        server.next_in_queue()
    assert info.value.errc == sockserv.ERRC_NO_SOCKETS_BOUND


def test_round_robin_order():
    server = SocketServer()
    a, b, c = Socket(4, 4), Socket(4, 4), Socket(4, 4)
    for sock in (a, b, c):
        server.bind(sock)
    order = [server.next_in_queue() for _ in range(4)]
    assert order == [a, b, c, a]
    assert len(server) == 3


def test_single_socket_repeats():
    server = SocketServer()
    sock = Socket(4, 4)
    server.bind(sock)
    assert server.next_in_queue() is sock
    assert server.next_in_queue() is sock


def test_remove_unbinds_socket():
    server = SocketServer()
    a, b, c = Socket(4, 4), Socket(4, 4), Socket(4, 4)
    for sock in (a, b, c):
        server.bind(sock)
    server.remove(b)
    assert b not in server
    assert [server.next_in_queue() for _ in range(3)] == [a, c, a]


def test_remove_unbound_socket_raises():
    server = SocketServer()
    server.bind(Socket(4, 4))
    with pytest.raises(SockServError) as info:
        server.remove(Socket(4, 4))
    assert info.value.errc == sockserv.ERRC_COULD_NOT_REMOVE_SOCKET


def test_removed_socket_keeps_its_data():
    server = SocketServer()
    sock = Socket(8, 8)
    server.bind(sock)
    sock.write(b"keep")
    server.remove(sock)
    assert len(server) == 0
    assert read_write_buffer(sock, 4) == b"keep"


def test_read_write_buffer_round_trip():
    sock = Socket(8, 8)
    sock.write(b"ping")
    assert read_write_buffer(sock, 4) == b"ping"
    assert sock.write_len() == 0


def test_read_write_buffer_overflow():
    sock = Socket(8, 8)
    sock.write(b"ab")
    with pytest.raises(SockServError) as info:
        read_write_buffer(sock, 3)
    assert info.value.errc == sockserv.ERRC_RW_WOULDOVERFLOW


def test_write_read_buffer_round_trip():
    sock = Socket(8, 8)
    write_read_buffer(sock, b"pong")
    assert sock.read_len() == 4
    assert sock.read(4) == b"pong"


def test_write_read_buffer_overflow():
    sock = Socket(4, 4)
    with pytest.raises(SockServError) as info:
        write_read_buffer(sock, b"full")
    assert info.value.errc == sockserv.ERRC_RW_WOULDOVERFLOW
    assert sock.read_len() == 0