"""
Unit tests for the privileged shell executor
"""

import subprocess
import unittest
from unittest.mock import Mock, patch

from simpleboot.executor import ShellExecutor


class TestShellExecutor(unittest.TestCase):
    """Test cases for ShellExecutor"""

    def _completed(self, returncode=0, stdout='', stderr=''):
        return Mock(returncode=returncode, stdout=stdout, stderr=stderr)

    def test_strict_batch_is_one_script_under_su(self):
        executor = ShellExecutor(privilege_wrapper='su -c', timeout=5)

        with patch('simpleboot.executor.shell.subprocess.run',
                   return_value=self._completed(stdout='OK\n')) as run:
            result = executor.run(['mkdir -p /a', 'echo OK'])

        argv = run.call_args[0][0]
        self.assertEqual(argv, ['su', '-c', 'set -e\nmkdir -p /a\necho OK'])
        self.assertEqual(run.call_args[1]['timeout'], 5)
        self.assertTrue(result.success)
        self.assertEqual(result.first_line(), 'OK')

    def test_lenient_batch_has_no_set_e(self):
        script = ShellExecutor.build_script(['a || true', 'b || true'], strict=False)
        self.assertEqual(script, 'a || true\nb || true')

    def test_without_wrapper_runs_shell_directly(self):
        executor = ShellExecutor(privilege_wrapper='')
        self.assertEqual(executor.build_argv('echo hi'), ['sh', '-c', 'echo hi'])

    def test_non_zero_exit(self):
        executor = ShellExecutor()
        with patch('simpleboot.executor.shell.subprocess.run',
                   return_value=self._completed(1, '', 'permission denied')):
            result = executor.run(['echo 1 > /sys/x'])

        self.assertFalse(result.success)
        self.assertEqual(result.returncode, 1)
        self.assertEqual(result.diagnostic(), 'permission denied')

    def test_empty_output_diagnostic(self):
        executor = ShellExecutor()
        with patch('simpleboot.executor.shell.subprocess.run',
                   return_value=self._completed(1)):
            result = executor.run(['false'])

        self.assertEqual(result.diagnostic(), 'Shell command failed (no output).')

    def test_timeout(self):
        executor = ShellExecutor(timeout=3)
        with patch('simpleboot.executor.shell.subprocess.run',
                   side_effect=subprocess.TimeoutExpired('su', 3)):
            result = executor.run(['sleep 10'])

        self.assertFalse(result.success)
        self.assertIn('timeout', result.diagnostic())

    def test_missing_wrapper_binary(self):
        executor = ShellExecutor()
        with patch('simpleboot.executor.shell.subprocess.run',
                   side_effect=FileNotFoundError(2, 'No such file or directory', 'su')):
            result = executor.run(['id'])

        self.assertFalse(result.success)
        self.assertIn('No such file', result.diagnostic())

    def test_empty_batch_runs_nothing(self):
        executor = ShellExecutor()
        with patch('simpleboot.executor.shell.subprocess.run') as run:
            self.assertTrue(executor.run([]).success)
        run.assert_not_called()


if __name__ == '__main__':
    unittest.main()
