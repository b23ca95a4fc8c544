"""
Shell manager for cmdguard.

This module runs a confirmed command through the system shell and streams
its output in real-time while also collecting it.
"""

import asyncio
import os
import time
from typing import Any, Callable, Dict, List, Optional

from cmdguard.utils.logging import get_logger

logger = get_logger("executor.shell_manager")


class CommandResult:
    """Class to store command execution results."""

    def __init__(
        self,
        command: str,
        return_code: int,
        stdout: str,
        stderr: str,
        duration: float,
        terminated: bool = False,
    ):
        """
        Initialize the command result.

        Args:
            command (str): The executed command.
            return_code (int): The command return code.
            stdout (str): Standard output from the command.
            stderr (str): Standard error from the command.
            duration (float): Execution duration in seconds.
            terminated (bool): Whether the command was terminated.
        """
        self.command = command
        self.return_code = return_code
        self.stdout = stdout
        self.stderr = stderr
        self.duration = duration
        self.terminated = terminated

    @property
    def success(self) -> bool:
        """
        Check if the command executed successfully.

        Returns:
            bool: True if return code is 0, False otherwise.
        """
        return self.return_code == 0

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the result to a dictionary.

        Returns:
            Dict[str, Any]: Dictionary representation of the result.
        """
        return {
            "command": self.command,
            "return_code": self.return_code,
            "stdout": self.stdout,
            "stderr": self.stderr,
            "duration": self.duration,
            "terminated": self.terminated,
            "success": self.success,
        }

    def __str__(self) -> str:
        status = "Success" if self.success else f"Failed (code {self.return_code})"
        if self.terminated:
            status = "Terminated"

        return (
            f"Command: {self.command}\n"
            f"Status: {status}\n"
            f"Duration: {self.duration:.2f}s"
        )


class ShellManager:
    """
    Manager for shell command execution.

    The command string is handed to the shell unmodified; cmdguard never
    rewrites what the user confirmed.
    """

    def __init__(self, shell: Optional[str] = None):
        """
        Initialize the shell manager.

        Args:
            shell (Optional[str]): Shell executable; None uses the system shell.
        """
        self.shell = shell

    async def execute_command(
        self,
        command: str,
        stdout_callback: Optional[Callable[[str], None]] = None,
        stderr_callback: Optional[Callable[[str], None]] = None,
        timeout: Optional[float] = None,
        cwd: Optional[str] = None,
        env: Optional[Dict[str, str]] = None,
    ) -> CommandResult:
        """
        Execute a shell command asynchronously.

        Args:
            command (str): The command to execute.
            stdout_callback (Optional[Callable]): Callback for stdout lines.
            stderr_callback (Optional[Callable]): Callback for stderr lines.
            timeout (Optional[float]): Timeout in seconds.
            cwd (Optional[str]): Working directory.
            env (Optional[Dict[str, str]]): Extra environment variables.

        Returns:
            CommandResult: Command execution result.

        Raises:
            asyncio.TimeoutError: If the command times out.
            OSError: If the command cannot be executed.
        """
        start_time = time.time()

        merged_env = os.environ.copy()
        if env:
            merged_env.update(env)

        shell_args: Dict[str, Any] = {}
        if self.shell:
            shell_args["executable"] = self.shell

        logger.debug(f"Executing command: {command}")
        process = await asyncio.create_subprocess_shell(
            command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=cwd,
            env=merged_env,
            **shell_args,
        )

        stdout_chunks: List[str] = []
        stderr_chunks: List[str] = []

        async def read_stream(stream, chunks, callback):
            while True:
                line = await stream.readline()
                if not line:
                    break

                line_str = line.decode("utf-8", errors="replace")
                chunks.append(line_str)

                if callback:
                    callback(line_str)

        stdout_task = asyncio.create_task(
            read_stream(process.stdout, stdout_chunks, stdout_callback)
        )
        stderr_task = asyncio.create_task(
            read_stream(process.stderr, stderr_chunks, stderr_callback)
        )

        try:
            if timeout:
                await asyncio.wait_for(process.wait(), timeout)
            else:
                await process.wait()

        except asyncio.TimeoutError:
            process.terminate()
            try:
                # Give it a chance to terminate gracefully
                await asyncio.wait_for(process.wait(), 2.0)
            except asyncio.TimeoutError:
                process.kill()
                await process.wait()

            logger.warning(f"Command timed out after {timeout} seconds: {command}")
            raise asyncio.TimeoutError(f"Command timed out after {timeout} seconds")

        finally:
            await stdout_task
            await stderr_task

        duration = time.time() - start_time
        logger.debug(f"Command exited with code {process.returncode}")

        return CommandResult(
            command=command,
            return_code=process.returncode,
            stdout="".join(stdout_chunks),
            stderr="".join(stderr_chunks),
            duration=duration,
        )

    def run_command(
        self,
        command: str,
        stdout_callback: Optional[Callable[[str], None]] = None,
        stderr_callback: Optional[Callable[[str], None]] = None,
        timeout: Optional[float] = None,
    ) -> CommandResult:
        """Synchronous wrapper around execute_command."""
        return asyncio.run(
            self.execute_command(
                command,
                stdout_callback=stdout_callback,
                stderr_callback=stderr_callback,
                timeout=timeout,
            )
        )
