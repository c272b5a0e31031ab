"""
Tests for the tuning dataset builder
"""

import json

import pandas as pd

from build_tune_data import (
    process_news_data,
    process_random_data,
    build_tune_dataframe,
    main
)

NEWS = [
    {'title': ' Markets rally ', 'description': '[Removed]', 'content': 'Stocks rose on Monday.'},
    {'title': '[Removed]', 'description': 'A storm is coming', 'content': None},
    'not an article',
]

RANDOM = [
    {'text': 'The cat sat on the mat.'},
    {'title': 'Recipe', 'content': 'Mix flour and water.'},
    {'text': '[Removed]'},
    {'text': '   '},
]


def test_process_news_data():
    assert process_news_data(NEWS) == [
        {'Sentence': 'Markets rally', 'Label': 'News Title'},
        {'Sentence': 'Stocks rose on Monday.', 'Label': 'News Article'},
        {'Sentence': 'A storm is coming', 'Label': 'News Description'},
    ]


def test_process_random_data():
    assert process_random_data(RANDOM) == [
        {'Sentence': 'The cat sat on the mat.', 'Label': 'Random'},
        {'Sentence': 'Recipe Mix flour and water.', 'Label': 'Random'},
    ]


def test_build_tune_dataframe_is_shuffled_copy_of_all_rows():
    df = build_tune_dataframe(NEWS, RANDOM, random_state=0)

    assert list(df.columns) == ['Sentence', 'Label']
    assert len(df) == 5
    assert sorted(df['Label']) == ['News Article', 'News Description', 'News Title', 'Random', 'Random']


def test_empty_inputs_give_empty_dataframe():
    df = build_tune_dataframe([], [])

    assert df.empty
    assert list(df.columns) == ['Sentence', 'Label']


def test_main_writes_csv(tmp_path):
    (tmp_path / 'exampleNews.json').write_text(json.dumps(NEWS), encoding='utf-8')
    (tmp_path / 'exampleRandom.json').write_text(json.dumps(RANDOM), encoding='utf-8')

    assert main(str(tmp_path)) == 0

    df = pd.read_csv(tmp_path / 'tuneData.csv')
    assert list(df.columns) == ['Sentence', 'Label']
    assert len(df) == 5


def test_main_reports_missing_input(tmp_path):
    assert main(str(tmp_path)) == 1
