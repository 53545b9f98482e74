class DataSourceError(RuntimeError):
    """
    データファイルの読み込み・パースに失敗したときに送出。
    message はそのまま利用者に表示する（HTTP 500 の本文 / チャート内テキスト）。
    """

    def __init__(self, message: str, path=None):
        super().__init__(message)
        self.message = message
        self.path = path
