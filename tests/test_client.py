import unittest
from unittest.mock import MagicMock, call, patch

from presentation_coach import client

BASE_URL = "http://backend.test/"


def fake_response(payload):
    resp = MagicMock()
    resp.json.return_value = payload
    resp.raise_for_status.return_value = None
    return resp


class WaitForEvaluationTest(unittest.TestCase):
    @patch("presentation_coach.client.requests.get")
    def test_polls_until_terminal_status(self, mock_get):
        mock_get.side_effect = [
            fake_response({"id": 3, "status": "processing"}),
            fake_response({"id": 3, "status": "processing"}),
            fake_response({"id": 3, "status": "completed", "overallScore": 81}),
        ]
        sleep = MagicMock()

        result = client.wait_for_evaluation(BASE_URL, 3, sleep=sleep)

        self.assertEqual(result["status"], "completed")
        self.assertEqual(mock_get.call_count, 3)
        self.assertEqual(sleep.call_args_list, [call(3.0), call(3.0)])
        mock_get.assert_called_with("http://backend.test/api/evaluations/3", timeout=client.TIMEOUT)

    @patch("presentation_coach.client.requests.get")
    def test_failed_is_terminal_too(self, mock_get):
        mock_get.return_value = fake_response({"id": 3, "status": "failed"})
        sleep = MagicMock()

        result = client.wait_for_evaluation(BASE_URL, 3, sleep=sleep)

        self.assertEqual(result["status"], "failed")
        sleep.assert_not_called()

    @patch("presentation_coach.client.requests.get")
    def test_timeout(self, mock_get):
        mock_get.return_value = fake_response({"id": 3, "status": "processing"})
        with self.assertRaises(TimeoutError):
            client.wait_for_evaluation(BASE_URL, 3, interval=1.0, timeout=0.5, sleep=MagicMock())


class RequestHelpersTest(unittest.TestCase):
    @patch("presentation_coach.client.requests.post")
    def test_upload_video_sends_multipart_fields(self, mock_post):
        mock_post.return_value = fake_response({"id": 1, "status": "processing"})

        result = client.upload_video(
            BASE_URL, b"data", "talk.mp4", "video/mp4", title="Demo", user_id=2
        )

        self.assertEqual(result["id"], 1)
        args, kwargs = mock_post.call_args
        self.assertEqual(args[0], "http://backend.test/api/evaluations/upload")
        self.assertEqual(kwargs["files"], {"video": ("talk.mp4", b"data", "video/mp4")})
        self.assertEqual(kwargs["data"], {"title": "Demo", "user_id": "2"})

    @patch("presentation_coach.client.requests.post")
    def test_create_user_raises_on_http_error(self, mock_post):
        resp = fake_response({})
        resp.raise_for_status.side_effect = client.requests.HTTPError("409")
        mock_post.return_value = resp

        with self.assertRaises(client.requests.HTTPError):
            client.create_user(BASE_URL, "alice", "x")

    @patch("presentation_coach.client.requests.get")
    def test_get_user_evaluations(self, mock_get):
        mock_get.return_value = fake_response([{"id": 2}, {"id": 1}])
        self.assertEqual([e["id"] for e in client.get_user_evaluations(BASE_URL, 1)], [2, 1])
        mock_get.assert_called_once_with(
            "http://backend.test/api/evaluations/user/1", timeout=client.TIMEOUT
        )


if __name__ == "__main__":
    unittest.main()
