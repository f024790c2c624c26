"""
Unit tests for stream supervision: connect, backoff, give-up and the monitor loop

A fake LogProcess and a recording sleep stand in for the heroku binary
and real delays.
"""
import asyncio

import pytest

from HLP.log_analysis.messages import NewEntry
from HLP.streaming.channel import LogChannel
from HLP.streaming.errors import MaxReconnectAttemptsError, SpawnError
from HLP.streaming.log_process import LogProcess
from HLP.streaming.stream_supervisor import (
    ConnectionState,
    ConnectionStatus,
    StreamSession,
    StreamSupervisor,
)

from conftest import make_line


class FakeProcess(LogProcess):
    def __init__(self, target, lines=(), fail=False):
        self.target = target
        self.lines = list(lines)
        self.fail = fail
        self.alive = False
        self.killed = False

    async def spawn(self):
        if self.fail:
            raise SpawnError("simulated spawn failure")
        self.alive = True

    async def read_lines(self):
        for line in self.lines:
            yield line

    def is_alive(self):
        return self.alive

    def kill(self):
        self.killed = True
        self.alive = False


class FakeFactory:
    """Hands out FakeProcesses; `fail_after` successful spawns, the rest fail"""

    def __init__(self, lines=(), fail_after=None):
        self.lines = lines
        self.fail_after = fail_after
        self.created = []

    def __call__(self, target):
        fail = self.fail_after is not None and len(self.created) >= self.fail_after
        process = FakeProcess(target, self.lines, fail=fail)
        self.created.append(process)
        return process


class RecordingSleep:
    def __init__(self, on_call=None):
        self.delays = []
        self.on_call = on_call

    async def __call__(self, delay):
        self.delays.append(delay)
        if self.on_call is not None:
            self.on_call(len(self.delays))


async def settle():
    """Let background reader tasks run"""
    for _ in range(5):
        await asyncio.sleep(0)


class TestStreamSupervisor:
    """Test StreamSupervisor"""

    def test_connect_forwards_parsed_entries(self):
        """Test lines from the process arrive as NewEntry messages"""
        channel = LogChannel()
        factory = FakeFactory(lines=[make_line("first"), "garbage", make_line("second")])

        async def scenario():
            supervisor = StreamSupervisor("myapp", channel, process_factory=factory, sleep=RecordingSleep())
            await supervisor.connect()
            await settle()
            return supervisor

        supervisor = asyncio.run(scenario())

        messages = channel.drain()
        assert all(isinstance(m, NewEntry) for m in messages)
        assert [m.entry.message for m in messages] == ["first", "second"]
        assert supervisor.reconnect_attempts == 0
        assert factory.created[0].target == "myapp"

    def test_gives_up_after_five_attempts(self):
        """Test an always-failing source: five attempts, then the sixth gives up"""
        sleep = RecordingSleep()
        supervisor = StreamSupervisor(
            "myapp", LogChannel(), process_factory=FakeFactory(fail_after=0), sleep=sleep,
        )

        async def scenario():
            for attempt in range(1, 6):
                with pytest.raises(SpawnError):
                    await supervisor.reconnect()
                assert supervisor.reconnect_attempts == attempt

            with pytest.raises(MaxReconnectAttemptsError) as exc_info:
                await supervisor.reconnect()
            return exc_info.value

        error = asyncio.run(scenario())

        assert supervisor.reconnect_attempts == 5
        assert sleep.delays == [1, 2, 4, 8, 16]
        assert str(error) == "Max reconnection attempts reached (5)"

    def test_successful_reconnect_resets_counter(self):
        """Test the counter returns to 0 once a reconnect succeeds"""
        factory = FakeFactory(fail_after=None)
        supervisor = StreamSupervisor("myapp", LogChannel(), process_factory=factory, sleep=RecordingSleep())
        supervisor.reconnect_attempts = 3

        asyncio.run(supervisor.reconnect())

        assert supervisor.reconnect_attempts == 0
        assert supervisor.is_running()

    def test_connect_kills_previous_process(self):
        """Test connecting again never leaves the old child running"""
        factory = FakeFactory()
        supervisor = StreamSupervisor("myapp", LogChannel(), process_factory=factory, sleep=RecordingSleep())

        async def scenario():
            await supervisor.connect()
            await supervisor.connect()

        asyncio.run(scenario())

        first, second = factory.created
        assert first.killed
        assert not second.killed
        assert supervisor.process is second

    def test_failed_connect_does_not_reset_counter(self):
        """Test killing the old process on connect keeps the attempt count"""
        factory = FakeFactory(fail_after=1)
        supervisor = StreamSupervisor("myapp", LogChannel(), process_factory=factory, sleep=RecordingSleep())

        async def scenario():
            await supervisor.connect()
            supervisor.reconnect_attempts = 2
            with pytest.raises(SpawnError):
                await supervisor.connect()

        asyncio.run(scenario())

        assert supervisor.reconnect_attempts == 2
        assert factory.created[0].killed
        assert not supervisor.is_running()

    def test_disconnect_kills_and_resets(self):
        """Test disconnect"""
        factory = FakeFactory()
        supervisor = StreamSupervisor("myapp", LogChannel(), process_factory=factory, sleep=RecordingSleep())

        async def scenario():
            await supervisor.connect()
            supervisor.reconnect_attempts = 4
            await supervisor.disconnect()

        asyncio.run(scenario())

        assert factory.created[0].killed
        assert supervisor.reconnect_attempts == 0
        assert not supervisor.is_running()

    def test_disconnect_without_process(self):
        """Test disconnect is safe before any connect"""
        supervisor = StreamSupervisor("myapp", LogChannel(), process_factory=FakeFactory())
        asyncio.run(supervisor.disconnect())
        assert supervisor.process is None

    def test_context_manager_disconnects(self):
        """Test leaving the async context kills the process"""
        factory = FakeFactory()

        async def scenario():
            async with StreamSupervisor("myapp", LogChannel(), process_factory=factory) as supervisor:
                await supervisor.connect()
                assert supervisor.is_running()

        asyncio.run(scenario())
        assert factory.created[0].killed

    def test_close_is_synchronous_kill(self):
        """Test close() kills without awaiting"""
        factory = FakeFactory()
        supervisor = StreamSupervisor("myapp", LogChannel(), process_factory=factory)

        async def scenario():
            await supervisor.connect()
            supervisor.close()

        asyncio.run(scenario())
        assert factory.created[0].killed

    def test_reader_stops_when_channel_closed(self):
        """Test a closed channel ends forwarding without errors"""
        channel = LogChannel()
        channel.close()
        factory = FakeFactory(lines=[make_line("dropped")])

        async def scenario():
            supervisor = StreamSupervisor("myapp", channel, process_factory=factory)
            await supervisor.connect()
            await settle()

        asyncio.run(scenario())
        assert channel.drain() == []


class TestConnectionState:
    """Test status descriptions"""

    def test_describe(self):
        assert ConnectionState(ConnectionStatus.RECONNECTING, attempt=3).describe() == "Reconnecting (attempt 3)"
        assert ConnectionState(ConnectionStatus.STREAMING, detail="myapp").describe() == "Streaming: myapp"
        assert ConnectionState(ConnectionStatus.DISCONNECTED).describe() == "Disconnected"


class TestStreamSession:
    """Test the supervising loop"""

    def make_session(self, factory, sleep):
        statuses = []
        supervisor = StreamSupervisor("myapp", LogChannel(), process_factory=factory, sleep=sleep)
        session = StreamSession(supervisor, on_status=statuses.append, monitor_interval=1.0, sleep=sleep)
        return session, statuses

    def test_start_failure_reports_failed(self):
        """Test a first connect that fails"""
        session, statuses = self.make_session(FakeFactory(fail_after=0), RecordingSleep())

        ok, message = asyncio.run(session.start())

        assert not ok
        assert message == "Connection failed: simulated spawn failure"
        assert statuses[-1].status == ConnectionStatus.FAILED
        assert not session.should_monitor

    def test_start_success(self):
        """Test a first connect that succeeds"""
        session, statuses = self.make_session(FakeFactory(), RecordingSleep())

        ok, message = asyncio.run(session.start())

        assert ok
        assert message == "Streaming logs from myapp"
        assert [s.status for s in statuses] == [ConnectionStatus.CONNECTING, ConnectionStatus.STREAMING]
        assert session.should_monitor

    def test_monitor_gives_up_after_max_attempts(self):
        """Test the loop reconnects with backoff, then reports FAILED and stops"""
        sleep = RecordingSleep()
        factory = FakeFactory(fail_after=1)
        session, statuses = self.make_session(factory, sleep)

        async def scenario():
            await session.start()
            factory.created[0].alive = False
            await session.monitor()

        asyncio.run(scenario())

        reconnecting = [s.attempt for s in statuses if s.status == ConnectionStatus.RECONNECTING]
        assert reconnecting == [1, 2, 3, 4, 5]
        assert statuses[-1].status == ConnectionStatus.FAILED
        assert statuses[-1].detail == "Reconnection failed: Max reconnection attempts reached (5)"
        assert not session.should_monitor
        # monitor interval sleeps interleaved with backoff delays
        assert [d for d in sleep.delays if d != 1.0] == [2, 4, 8, 16]

    def test_monitor_recovers(self):
        """Test a dead process is replaced and streaming resumes"""
        session = None

        def stop_after_three(calls):
            if calls >= 3:
                session.should_monitor = False

        factory = FakeFactory()
        session, statuses = self.make_session(factory, RecordingSleep(on_call=stop_after_three))

        async def scenario():
            await session.start()
            factory.created[0].alive = False
            await session.monitor()

        asyncio.run(scenario())

        assert len(factory.created) == 2
        assert factory.created[1].alive
        assert session.supervisor.reconnect_attempts == 0
        assert ConnectionStatus.RECONNECTING in [s.status for s in statuses]
        assert statuses[-1].status == ConnectionStatus.STREAMING

    def test_stop(self):
        """Test stop disconnects and ends monitoring"""
        factory = FakeFactory()
        session, statuses = self.make_session(factory, RecordingSleep())

        async def scenario():
            await session.start()
            await session.stop()
            await session.monitor()

        asyncio.run(scenario())

        assert factory.created[0].killed
        assert not session.should_monitor
        assert statuses[-1].status == ConnectionStatus.DISCONNECTED
