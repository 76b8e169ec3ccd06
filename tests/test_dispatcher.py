import threading

import grpc
import pytest

from assetgw.dispatcher import COMMANDS, Command, CommandTable, Dispatcher
from assetgw.errors import InvalidMenuChoice, SessionClosedError
from assetgw.gateway import COMMIT, EVALUATE, SUBMIT, Gateway
from assetgw.protos import gateway as gateway_protos
from tests.fakes import FakeRpcError, ScriptedInput, console_output


@pytest.fixture
def session(fake_peer, identity, signer):
    return Gateway(fake_peer, identity, signer, 'mychannel', 'basic')


def dispatcher_for(session, console, *answers, pause=False):
    read_input = ScriptedInput(*answers)
    return Dispatcher(session, console=console, read_input=read_input, pause=pause), read_input


class TestCommandTable:
    @pytest.mark.parametrize('answers, expected', [
        (['1'], ('evaluate', 'GetAllAssets', [])),
        (['2'], ('evaluate', 'GetAllOwners', [])),
        (['3', 'asset123', 'owner2', 'false'], ('submit', 'TransferAsset', ['asset123', 'owner2', 'false'])),
        (['4', 'asset1', 'red'], ('submit', 'ChangeColor', ['asset1', 'red'])),
        (['5', 'asset1', 'brakes', '300'], ('submit', 'CreateFailure', ['asset1', 'brakes', '300'])),
        (['6', 'asset1'], ('submit', 'RepairFailures', ['asset1'])),
        (['7', 'blue'], ('evaluate', 'FindColor', ['blue'])),
        (['8', 'Tomoko'], ('evaluate', 'FindOwner', ['Tomoko'])),
        (['9', 'owner5', 'red'], ('evaluate', 'FindOwnerColor', ['red', 'owner5'])),
        (['10', 'asset1'], ('evaluate', 'ReadAsset', ['asset1'])),
        (['11'], ('submit', 'InitLedger', [])),
    ])
    @pytest.mark.asyncio
    async def test_menu_key_invokes_transaction(self, session, console, gateway_service, answers, expected):
        dispatcher, _ = dispatcher_for(session, console, *answers, '0')

        await dispatcher.run()

        assert gateway_service.invocations == [expected]

    def test_menu_text(self):
        menu = COMMANDS.menu()

        assert ' 1.) GetAllAssets' in menu
        assert ' 9.) FindColorOwner' in menu
        assert ' 11.) InitLedger' in menu
        assert menu.rstrip().endswith('0.) Exit')

    def test_arity(self):
        assert [command.arity for command in COMMANDS] == [0, 0, 3, 2, 3, 1, 1, 1, 2, 1, 0]

    def test_lookup_strips_whitespace(self):
        assert COMMANDS.lookup(' 7 ').operation == 'FindColor'

    @pytest.mark.parametrize('choice', ['12', 'abc', '', '-1'])
    def test_lookup_unknown(self, choice):
        with pytest.raises(InvalidMenuChoice):
            COMMANDS.lookup(choice)

    def test_duplicate_keys(self):
        with pytest.raises(ValueError, match='Duplicate'):
            CommandTable([Command('1', 'A', 'A', EVALUATE), Command('1', 'B', 'B', SUBMIT)])

    def test_exit_key_is_reserved(self):
        with pytest.raises(ValueError, match='reserved'):
            CommandTable([Command('0', 'A', 'A', EVALUATE)])

    def test_empty_table(self):
        with pytest.raises(ValueError):
            CommandTable([])

    def test_unknown_verb(self):
        with pytest.raises(ValueError, match='verb'):
            Command('1', 'A', 'A', 'query')

    def test_call_order_must_match_prompts(self):
        with pytest.raises(ValueError, match='call order'):
            Command('1', 'A', 'A', EVALUATE, [('color', 'Color:')], call_order=['owner'])

    def test_collect_asks_in_prompt_order(self):
        read_input = ScriptedInput('Tomoko', 'blue')

        args = COMMANDS.lookup('9').collect(read_input)

        assert read_input.prompts == ['OwnerId:', 'Color:']
        assert args == ['blue', 'Tomoko']


class TestDispatcher:
    @pytest.mark.asyncio
    async def test_exit_without_calls(self, session, console, gateway_service):
        dispatcher, read_input = dispatcher_for(session, console, '0')

        await dispatcher.run()

        assert gateway_service.calls == []
        assert len(read_input.prompts) == 1

    @pytest.mark.asyncio
    async def test_end_of_input_exits(self, session, console, gateway_service):
        dispatcher, _ = dispatcher_for(session, console)

        await dispatcher.run()

        assert gateway_service.calls == []

    @pytest.mark.asyncio
    async def test_end_of_input_while_collecting(self, session, console, gateway_service):
        dispatcher, _ = dispatcher_for(session, console, '3', 'asset1')

        await dispatcher.run()

        assert gateway_service.calls == []

    @pytest.mark.asyncio
    async def test_evaluate_prints_json(self, session, console, gateway_service):
        gateway_service.results['GetAllAssets'] = b'[{"ID":"asset1","Color":"blue"}]'
        dispatcher, _ = dispatcher_for(session, console, '1', '0')

        await dispatcher.run()

        output = console_output(console)
        assert '--> Evaluate Transaction: GetAllAssets' in output
        assert '*** Result:' in output
        assert '"ID": "asset1"' in output

    @pytest.mark.asyncio
    async def test_submit_reports_commit(self, session, console, gateway_service):
        dispatcher, _ = dispatcher_for(session, console, '3', 'asset1', 'Tom', 'false', '0')

        await dispatcher.run()

        output = console_output(console)
        assert '--> Submit Transaction: TransferAsset' in output
        assert '*** Transaction committed successfully' in output
        assert '*** No result' in output

    @pytest.mark.asyncio
    async def test_result_not_json(self, session, console, gateway_service):
        gateway_service.results['FindOwner'] = b'no [owner] here'
        dispatcher, _ = dispatcher_for(session, console, '8', 'Tomoko', '0')

        await dispatcher.run()

        assert '*** Result (not JSON): no [owner] here' in console_output(console)

    @pytest.mark.asyncio
    async def test_invalid_choice_keeps_looping(self, session, console, gateway_service):
        gateway_service.results['GetAllOwners'] = b'["Tomoko"]'
        dispatcher, read_input = dispatcher_for(session, console, '42', '2', '0')

        await dispatcher.run()

        assert 'You chose a wrong value: "42"' in console_output(console)
        assert gateway_service.invocations == [('evaluate', 'GetAllOwners', [])]
        assert len(read_input.prompts) == 3

    @pytest.mark.asyncio
    async def test_failed_command_keeps_looping(self, session, console, gateway_service):
        gateway_service.failures[gateway_protos.ENDORSE] = FakeRpcError(
            grpc.StatusCode.ABORTED, 'asset asset9 does not exist')
        dispatcher, _ = dispatcher_for(session, console, '6', 'asset9', '1', '0')

        await dispatcher.run()

        output = console_output(console)
        assert '*** Contract error: asset asset9 does not exist' in output
        assert gateway_service.invocations[-1] == ('evaluate', 'GetAllAssets', [])

    @pytest.mark.asyncio
    async def test_timeout_names_phase(self, session, console, gateway_service):
        gateway_service.failures[gateway_protos.COMMIT_STATUS] = FakeRpcError(grpc.StatusCode.DEADLINE_EXCEEDED)
        dispatcher, _ = dispatcher_for(session, console, '4', 'asset1', 'red', '0')

        await dispatcher.run()

        output = console_output(console)
        assert f'*** Timeout ({COMMIT}):' in output
        assert 'committed successfully' not in output

    @pytest.mark.asyncio
    async def test_unavailable_peer_keeps_looping(self, session, console, gateway_service):
        gateway_service.failures[gateway_protos.EVALUATE] = FakeRpcError(grpc.StatusCode.UNAVAILABLE, 'gone')
        dispatcher, read_input = dispatcher_for(session, console, '1', '1', '0')

        await dispatcher.run()

        assert console_output(console).count('*** Connection error') == 2
        assert len(read_input.prompts) == 3

    @pytest.mark.asyncio
    async def test_commit_failure(self, session, console, gateway_service):
        gateway_service.commit_code = 11
        dispatcher, _ = dispatcher_for(session, console, '11', '0')

        await dispatcher.run()

        assert '*** Commit failed:' in console_output(console)
        assert 'MVCC_READ_CONFLICT' in console_output(console)

    @pytest.mark.asyncio
    async def test_pause_after_each_command(self, session, console, gateway_service):
        dispatcher, read_input = dispatcher_for(session, console, '1', '', '0', pause=True)

        await dispatcher.run()

        assert read_input.prompts[1] == ''
        assert len(read_input.prompts) == 3

    @pytest.mark.asyncio
    async def test_closed_session_ends_loop(self, session, console):
        session.close()
        dispatcher, _ = dispatcher_for(session, console, '1', '0')

        with pytest.raises(SessionClosedError):
            await dispatcher.run()

    @pytest.mark.asyncio
    async def test_input_is_read_off_the_event_loop(self, session, console, gateway_service):
        read_input = ScriptedInput('8', 'Tomoko', '', '0')
        threads = []

        def recording_input(prompt=''):
            threads.append(threading.current_thread())
            return read_input(prompt)

        dispatcher = Dispatcher(session, console=console, read_input=recording_input, pause=True)

        await dispatcher.run()

        assert len(threads) == 4
        assert threading.main_thread() not in threads
        assert gateway_service.invocations == [('evaluate', 'FindOwner', ['Tomoko'])]
