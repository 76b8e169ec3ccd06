# SPDX-License-Identifier: Apache-2.0
"""Interactive menu mapping operator choices onto chaincode transactions."""
import asyncio
import logging

from rich.console import Console
from rich.markup import escape

from .decoder import decode_result
from .errors import InvalidMenuChoice, MalformedResponseError, PeerConnectionError, RemoteInvocationError, \
    RemoteTimeoutError
from .gateway import EVALUATE, SUBMIT

_logger = logging.getLogger(__name__)

EXIT_CHOICE = '0'


class Command(object):
    """One menu entry: the transaction it invokes and the arguments it asks for.

    ``prompts`` lists ``(argument, prompt)`` pairs in the order the operator is
    asked; ``call_order`` lists the arguments in the order the transaction
    expects them and defaults to the prompt order.
    """

    def __init__(self, key, label, operation, verb, prompts=(), call_order=None):
        if not key:
            raise ValueError('Missing required parameter "key".')
        if not operation:
            raise ValueError('Missing required parameter "operation".')
        if verb not in (EVALUATE, SUBMIT):
            raise ValueError(f'Command {key} verb must be "{EVALUATE}" or "{SUBMIT}", got "{verb}"')

        self._key = key
        self._label = label or operation
        self._operation = operation
        self._verb = verb
        self._prompts = tuple(prompts)

        names = [name for name, _ in self._prompts]
        if len(set(names)) != len(names):
            raise ValueError(f'Command {key} asks for the same argument twice: {names}')

        self._call_order = tuple(call_order) if call_order is not None else tuple(names)
        if sorted(self._call_order) != sorted(names):
            raise ValueError(f'Command {key} call order {list(self._call_order)} does not match its prompts {names}')

    @property
    def key(self):
        return self._key

    @property
    def label(self):
        return self._label

    @property
    def operation(self):
        return self._operation

    @property
    def verb(self):
        return self._verb

    @property
    def arity(self):
        return len(self._prompts)

    def collect(self, read_input):
        """Ask for each argument and return them in call order."""
        values = {}
        for name, prompt in self._prompts:
            values[name] = read_input(prompt)
        return [values[name] for name in self._call_order]

    def __str__(self):
        return f'{self._key}.) {self._label}'


class CommandTable(object):

    def __init__(self, commands):
        self._commands = {}
        for command in commands:
            if command.key == EXIT_CHOICE:
                raise ValueError(f'Key {EXIT_CHOICE} is reserved to exit the menu')
            if command.key in self._commands:
                raise ValueError(f'Duplicate menu key: {command.key}')
            self._commands[command.key] = command

        if not self._commands:
            raise ValueError('A command table needs at least one command')

    def lookup(self, choice):
        command = self._commands.get(choice.strip())
        if command is None:
            raise InvalidMenuChoice(choice)
        return command

    def menu(self):
        lines = [f' {command}' for command in self]
        lines.append(f' {EXIT_CHOICE}.) Exit')
        return '\n' + '\n'.join(lines) + '\n'

    def __iter__(self):
        return iter(self._commands.values())

    def __len__(self):
        return len(self._commands)


COMMANDS = CommandTable([
    Command('1', 'GetAllAssets', 'GetAllAssets', EVALUATE),
    Command('2', 'GetAllOwners', 'GetAllOwners', EVALUATE),
    Command('3', 'TransferAsset', 'TransferAsset', SUBMIT, [
        ('assetId', 'AssetId:'),
        ('newOwner', 'NewOwnerId:'),
        ('buyWithFailure', 'BuyWithFailure:'),
    ]),
    Command('4', 'ChangeColor', 'ChangeColor', SUBMIT, [
        ('assetId', 'AssetId:'),
        ('color', 'Color:'),
    ]),
    Command('5', 'CreateFailure', 'CreateFailure', SUBMIT, [
        ('assetId', 'AssetId:'),
        ('failureName', 'Failure name:'),
        ('price', 'Price:'),
    ]),
    Command('6', 'RepairFailures', 'RepairFailures', SUBMIT, [
        ('assetId', 'AssetId:'),
    ]),
    Command('7', 'FindColor', 'FindColor', EVALUATE, [
        ('color', 'Color:'),
    ]),
    Command('8', 'FindOwner', 'FindOwner', EVALUATE, [
        ('ownerId', 'OwnerId:'),
    ]),
    # asks for the owner first but the transaction takes the color first
    Command('9', 'FindColorOwner', 'FindOwnerColor', EVALUATE, [
        ('ownerId', 'OwnerId:'),
        ('color', 'Color:'),
    ], call_order=['color', 'ownerId']),
    Command('10', 'ReadAsset', 'ReadAsset', EVALUATE, [
        ('assetId', 'AssetId:'),
    ]),
    Command('11', 'InitLedger', 'InitLedger', SUBMIT),
])


class Dispatcher(object):
    """Prompt loop running one command at a time against a gateway session.

    Failures of a single command are reported and the loop goes on; only the
    exit choice, the end of input or an error outside a command's scope (a
    closed session) ends it.
    """

    def __init__(self, gateway, console=None, read_input=None, commands=COMMANDS, pause=False):
        self._gateway = gateway
        self._console = console or Console()
        self._read_input = read_input or self._console.input
        self._commands = commands
        self._pause = pause

    async def run(self):
        _logger.debug('run - start')

        while True:
            try:
                choice = (await self._ask(self._read_input, self._commands.menu())).strip()
            except EOFError:
                _logger.debug('run - end of input')
                break

            if choice == EXIT_CHOICE:
                break

            try:
                command = self._commands.lookup(choice)
            except InvalidMenuChoice as e:
                self.report_error(e)
                continue

            try:
                args = await self._ask(command.collect, self._read_input)
            except EOFError:
                _logger.debug(f'run - end of input while collecting arguments of {command.operation}')
                break

            await self.execute(command, args)

            if self._pause:
                try:
                    await self._ask(self._read_input, '')
                except EOFError:
                    break

        _logger.debug('run - exit')

    async def _ask(self, read, *args):
        # input() blocks; read in a worker thread
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, read, *args)

    async def execute(self, command, args):
        """Invoke one command and print its outcome. Returns True on success."""
        _logger.debug(f'execute - {command.operation} ({command.verb}) args: {args}')

        try:
            if command.verb == SUBMIT:
                self._console.print(f'\n--> Submit Transaction: {escape(command.operation)}')
                payload = await self._gateway.submit(command.operation, args)
                self._console.print('*** Transaction committed successfully')
            else:
                self._console.print(f'\n--> Evaluate Transaction: {escape(command.operation)}')
                payload = await self._gateway.evaluate(command.operation, args)
        except (RemoteTimeoutError, RemoteInvocationError, PeerConnectionError) as e:
            _logger.debug(f'execute - {command.operation} failed: {e!r}')
            self.report_error(e)
            return False

        self.show_result(payload)
        return True

    def show_result(self, payload):
        try:
            result = decode_result(payload)
        except MalformedResponseError as e:
            self._console.print('*** Result (not JSON):', e.text, markup=False, highlight=False)
            return

        if result is None:
            self._console.print('*** No result')
        else:
            self._console.print('*** Result:')
            self._console.print_json(data=result)

    def report_error(self, error):
        title = error.category
        if isinstance(error, RemoteTimeoutError):
            title = f'{title} ({error.phase})'

        self._console.print(f'[bold red]*** {escape(title)}:[/] {escape(str(error))}')
        for detail in getattr(error, 'details', []):
            self._console.print(f'    {escape(detail.address)} ({escape(detail.msp_id)}): {escape(detail.message)}',
                                highlight=False)
