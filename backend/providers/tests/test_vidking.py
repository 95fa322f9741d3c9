from django.test import SimpleTestCase

from providers.base import MediaDescriptor, MediaKind, PlaybackOptions
from providers.exceptions import MissingIdentifier, UnsupportedKind
from providers.vidking import build_vidking_url


class VidkingUrlTests(SimpleTestCase):
    def test_movie_url(self):
        url = build_vidking_url(
            MediaDescriptor(MediaKind.MOVIE, "1078605"),
            PlaybackOptions(),
        )
        self.assertEqual(
            url,
            "https://www.vidking.net/embed/movie/1078605",
        )

    def test_tv_url(self):
        url = build_vidking_url(
            MediaDescriptor(MediaKind.TV, "119051", season=1, episode=8),
            PlaybackOptions(),
        )
        self.assertEqual(
            url,
            "https://www.vidking.net/embed/tv/119051/1/8",
        )

    def test_tv_defaults_to_first_episode(self):
        url = build_vidking_url(MediaDescriptor("tv", 119051), PlaybackOptions())
        self.assertEqual(url, "https://www.vidking.net/embed/tv/119051/1/1")

    def test_tv_options_use_vidking_names(self):
        url = build_vidking_url(
            MediaDescriptor(MediaKind.TV, "42", season=2, episode=5),
            PlaybackOptions(
                color="#66CCFF",
                autoplay=True,
                next_episode=True,
                episode_selector=False,
                start_at=125.9,
            ),
        )
        self.assertEqual(
            url,
            "https://www.vidking.net/embed/tv/42/2/5"
            "?color=66ccff&autoPlay=true&nextEpisode=true"
            "&episodeSelector=false&progress=125",
        )

    def test_movie_drops_episode_only_options(self):
        url = build_vidking_url(
            MediaDescriptor(MediaKind.MOVIE, "550"),
            PlaybackOptions(autoplay=False, next_episode=True, muted=True, server="x"),
        )
        self.assertEqual(url, "https://www.vidking.net/embed/movie/550?autoPlay=false")

    def test_invalid_color_is_omitted(self):
        url = build_vidking_url(
            MediaDescriptor(MediaKind.MOVIE, "550"),
            PlaybackOptions(color="blue"),
        )
        self.assertNotIn("color", url)
        self.assertNotIn("undefined", url)

    def test_missing_id_rejected(self):
        with self.assertRaises(MissingIdentifier):
            build_vidking_url(MediaDescriptor(MediaKind.MOVIE, ""), PlaybackOptions())

    def test_anime_rejected(self):
        with self.assertRaises(UnsupportedKind):
            build_vidking_url(MediaDescriptor(MediaKind.ANIME, "1"), PlaybackOptions())
