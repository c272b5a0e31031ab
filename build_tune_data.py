"""
Build the tuning dataset from collected news articles and random texts.

Reads exampleNews.json and exampleRandom.json, labels every usable sentence
and writes a shuffled tuneData.csv with Sentence and Label columns.
"""

import os
import sys
import json

import pandas as pd

REMOVED_MARKER = '[Removed]'

NEWS_FIELDS = [
    ('title', 'News Title'),
    ('description', 'News Description'),
    ('content', 'News Article'),
]
RANDOM_LABEL = 'Random'
COLUMNS = ['Sentence', 'Label']


def clean_entry(value):
    """Return the stripped text, or None for missing, empty and removed entries"""
    if not isinstance(value, str):
        return None
    value = value.strip()
    if not value or value == REMOVED_MARKER:
        return None
    return value


def process_news_data(news_data):
    """Split each article into labelled title, description and content rows"""
    entries = []
    for item in news_data:
        if not isinstance(item, dict):
            continue
        for field, label in NEWS_FIELDS:
            sentence = clean_entry(item.get(field))
            if sentence:
                entries.append({'Sentence': sentence, 'Label': label})
    return entries


def process_random_data(random_data):
    """Label random texts; items without a text field use their title and content"""
    entries = []
    for item in random_data:
        if not isinstance(item, dict):
            continue
        sentence = clean_entry(item.get('text'))
        if sentence is None:
            parts = [clean_entry(item.get('title')), clean_entry(item.get('content'))]
            sentence = clean_entry(' '.join(part for part in parts if part))
        if sentence:
            entries.append({'Sentence': sentence, 'Label': RANDOM_LABEL})
    return entries


def build_tune_dataframe(news_data, random_data, random_state=None):
    entries = process_news_data(news_data) + process_random_data(random_data)
    df = pd.DataFrame(entries, columns=COLUMNS)
    if df.empty:
        return df
    return df.sample(frac=1, random_state=random_state).reset_index(drop=True)


def load_json_list(filepath):
    with open(filepath, 'r', encoding='utf-8') as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"{filepath} must contain a JSON list")
    return data


def build_tune_data(news_path, random_path, output_path, random_state=None):
    """Read both sources, build the dataset and write it to CSV"""
    news_data = load_json_list(news_path)
    random_data = load_json_list(random_path)

    df = build_tune_dataframe(news_data, random_data, random_state)
    df.to_csv(output_path, index=False)

    print(f"Dataset built with {len(df)} samples")
    for label, count in df['Label'].value_counts().items():
        print(f"  {label}: {count}")
    return df


def main(base_dir=None):
    base_dir = base_dir or os.path.dirname(os.path.abspath(__file__))
    news_path = os.path.join(base_dir, 'exampleNews.json')
    random_path = os.path.join(base_dir, 'exampleRandom.json')
    output_path = os.path.join(base_dir, 'tuneData.csv')

    try:
        build_tune_data(news_path, random_path, output_path)
        print(f"✓ CSV file created successfully at {output_path}")
        return 0
    except (OSError, ValueError) as e:
        print(f"✗ An error occurred: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
