"""Stateful property tests for the partition output session.

Random sequences of host calls are checked against a simple model: the
store must hold exactly the partitions that were closed successfully,
keyed by consecutive partition indices, and no staging file may outlive
close().
"""

import shutil
import tempfile
from pathlib import Path

from hypothesis import strategies as st
from hypothesis.stateful import RuleBasedStateMachine, invariant, precondition, rule

from oss_output.contracts.enums import SessionState
from oss_output.contracts.errors import IllegalSessionStateError, UploadError
from oss_output.plugins.oss.naming import KeyNamer
from oss_output.plugins.oss.session import PartitionOutputSession
from oss_output.plugins.oss.staging import StagingFileManager
from oss_output.plugins.oss.uploader import ObjectUploader
from tests.conftest import TEST_BUCKET, FakeObjectStore

TASK_INDEX = 5


class SessionMachine(RuleBasedStateMachine):
    def __init__(self) -> None:
        super().__init__()
        self.staging_dir = Path(tempfile.mkdtemp(prefix="session-machine-"))
        self.store = FakeObjectStore()
        self.namer = KeyNamer("m/", ".%03d.%02d", ".bin")
        self.session = PartitionOutputSession(
            TASK_INDEX,
            namer=self.namer,
            staging=StagingFileManager(str(self.staging_dir)),
            uploader=ObjectUploader(self.store, TEST_BUCKET),  # type: ignore[arg-type]
        )
        # Model
        self.committed: dict[str, bytes] = {}
        self.pending: bytes | None = None
        self.next_partition = 0
        self.failed = False

    def _close_pending(self) -> None:
        if self.pending is None:
            return
        key = self.namer.build_key(TASK_INDEX, self.next_partition)
        if key in self.store.fail_put_keys:
            self.failed = True
            self.pending = None
            return
        self.committed[key] = self.pending
        self.pending = None
        self.next_partition += 1

    @precondition(lambda self: not self.failed)
    @rule()
    def open_next_partition(self) -> None:
        key = self.namer.build_key(TASK_INDEX, self.next_partition)
        expect_failure = self.pending is not None and key in self.store.fail_put_keys
        if expect_failure:
            try:
                self.session.open_next_partition()
            except UploadError:
                pass
            else:
                raise AssertionError("expected UploadError")
            self._close_pending()
            return
        self.session.open_next_partition()
        self._close_pending()
        self.pending = b""

    @precondition(lambda self: not self.failed)
    @rule(data=st.binary(max_size=16))
    def append(self, data: bytes) -> None:
        if self.pending is None:
            try:
                self.session.append(data)
            except IllegalSessionStateError:
                return
            raise AssertionError("append without open partition must fail")
        self.session.append(data)
        self.pending += data

    @precondition(lambda self: not self.failed)
    @rule()
    def close_partition(self) -> None:
        key = self.namer.build_key(TASK_INDEX, self.next_partition)
        if self.pending is not None and key in self.store.fail_put_keys:
            try:
                self.session.close_partition()
            except UploadError:
                pass
            else:
                raise AssertionError("expected UploadError")
        else:
            self.session.close_partition()
        self._close_pending()

    @precondition(lambda self: not self.failed)
    @rule()
    def fail_next_put(self) -> None:
        self.store.fail_put_keys.add(self.namer.build_key(TASK_INDEX, self.next_partition))

    @rule()
    def abort(self) -> None:
        self.session.abort()
        self.pending = None
        self.failed = True

    @invariant()
    def store_matches_model(self) -> None:
        assert {key: self.store.get(key) for key in self.store.keys()} == self.committed

    @invariant()
    def index_matches_model(self) -> None:
        assert self.session.partition_index == self.next_partition

    @invariant()
    def state_matches_model(self) -> None:
        if self.failed:
            assert self.session.state is SessionState.FAILED
        elif self.pending is not None:
            assert self.session.state is SessionState.OPEN
        else:
            assert self.session.state is SessionState.IDLE

    @invariant()
    def at_most_one_staging_file(self) -> None:
        expected = 1 if self.pending is not None else 0
        assert len(list(self.staging_dir.iterdir())) == expected

    def teardown(self) -> None:
        try:
            self.session.close()
            assert list(self.staging_dir.iterdir()) == []
        finally:
            shutil.rmtree(self.staging_dir, ignore_errors=True)


TestSessionStateMachine = SessionMachine.TestCase
